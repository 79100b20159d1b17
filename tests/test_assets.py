"""Tests for asset link rewriting and copying into the vault."""

from __future__ import annotations

from pathlib import Path

import pytest

from logsidian.errors import FileAccessError, MissingAssetDirectoryError
from logsidian.transform import AssetRelocator, is_asset_target


@pytest.fixture
def relocator(graph_dir: Path, vault: Path) -> AssetRelocator:
    return AssetRelocator(page_dir=graph_dir / "pages", asset_dir=vault / "assets")


# ── detection ───────────────────────────────────────────────────────


class TestIsAssetTarget:
    @pytest.mark.parametrize(
        "target", ["../assets/pic.png", "assets/doc.pdf", "image.JPG", "../assets/a b.png"]
    )
    def test_relative_files(self, target):
        assert is_asset_target(target)

    @pytest.mark.parametrize(
        "target",
        [
            "https://example.org/pic.png",
            "file:///tmp/pic.png",
            "/abs/pic.png",
            "#heading",
            "Other Page.md",
            "no-extension",
            "",
        ],
    )
    def test_non_assets(self, target):
        assert not is_asset_target(target)


# ── rewriting ───────────────────────────────────────────────────────


class TestRewrite:
    def test_image_link_points_into_vault_assets(self, relocator, graph_dir, vault):
        assert relocator.rewrite("![pic](../assets/pic.png)") == "![pic](assets/pic.png)"
        [copy] = relocator.planned.values()
        assert Path(copy.source) == (graph_dir / "assets" / "pic.png").resolve()
        assert Path(copy.destination) == vault / "assets" / "pic.png"
        assert copy.link == "assets/pic.png"

    def test_size_suffix_dropped(self, relocator):
        out = relocator.rewrite("![pic](../assets/pic.png){:height 120, :width 300}")
        assert out == "![pic](assets/pic.png)"

    def test_non_image_asset(self, relocator):
        assert relocator.rewrite("[doc](../assets/doc.pdf)") == "[doc](assets/doc.pdf)"

    def test_title_kept(self, relocator):
        out = relocator.rewrite('![pic](../assets/pic.png "A picture")')
        assert out == '![pic](assets/pic.png "A picture")'

    def test_percent_escaped_name(self, relocator, vault):
        out = relocator.rewrite("![s](../assets/my%20pic.png)")
        assert out == "![s](assets/my%20pic.png)"
        [copy] = relocator.planned.values()
        assert Path(copy.destination) == vault / "assets" / "my pic.png"

    def test_urls_untouched(self, relocator):
        content = "![x](https://example.org/a.png) and [site](https://example.org)"
        assert relocator.rewrite(content) == content
        assert relocator.planned == {}

    def test_code_untouched(self, relocator):
        content = "`![pic](../assets/pic.png)`"
        assert relocator.rewrite(content) == content
        assert relocator.planned == {}

    def test_same_asset_planned_once(self, relocator):
        relocator.rewrite("![a](../assets/pic.png) ![b](../assets/pic.png)")
        assert len(relocator.planned) == 1

    def test_custom_link_prefix(self, graph_dir, vault):
        relocator = AssetRelocator(graph_dir / "pages", vault / "assets", link_prefix="files/")
        assert relocator.rewrite("![p](../assets/pic.png)") == "![p](files/pic.png)"


# ── copying ─────────────────────────────────────────────────────────


class TestCopy:
    def test_copies_bytes(self, relocator, graph_dir, vault):
        relocator.rewrite("![pic](../assets/pic.png)")
        copies = relocator.copy_assets()
        assert len(copies) == 1
        original = (graph_dir / "assets" / "pic.png").read_bytes()
        assert (vault / "assets" / "pic.png").read_bytes() == original

    def test_overwrites_existing_file(self, relocator, graph_dir, vault):
        (vault / "assets" / "pic.png").write_bytes(b"old")
        relocator.rewrite("![pic](../assets/pic.png)")
        relocator.copy_assets()
        original = (graph_dir / "assets" / "pic.png").read_bytes()
        assert (vault / "assets" / "pic.png").read_bytes() == original

    def test_no_temp_files_left(self, relocator, vault):
        relocator.rewrite("![pic](../assets/pic.png)")
        relocator.copy_assets()
        assert [p.name for p in (vault / "assets").iterdir()] == ["pic.png"]

    def test_nothing_planned_copies_nothing(self, relocator, vault):
        assert relocator.copy_assets() == []
        assert list((vault / "assets").iterdir()) == []

    def test_missing_destination_directory(self, graph_dir, tmp_path):
        missing = tmp_path / "no-vault" / "assets"
        relocator = AssetRelocator(graph_dir / "pages", missing)
        with pytest.raises(MissingAssetDirectoryError) as exc_info:
            relocator.ensure_destination()
        assert exc_info.value.path == missing
        assert str(missing) in str(exc_info.value)

    def test_missing_source_copies_nothing(self, relocator, vault):
        relocator.rewrite("![pic](../assets/pic.png) ![gone](../assets/gone.png)")
        with pytest.raises(FileAccessError) as exc_info:
            relocator.copy_assets()
        assert "gone.png" in str(exc_info.value)
        assert list((vault / "assets").iterdir()) == []
