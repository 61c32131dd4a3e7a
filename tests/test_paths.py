"""Tests for entry path normalization and output path resolution."""

from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tarstream.errors import PathTraversalError
from tarstream.paths import normalize_entry_path, resolve_output_path


class TestNormalizeEntryPath:
    """Test normalize_entry_path canonicalization."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("file.txt", "file.txt"),
            ("dir/sub/file.txt", "dir/sub/file.txt"),
            ("dir/", "dir"),
            ("./dir/file", "dir/file"),
            ("/abs/file", "abs/file"),
            ("a//b///c", "a/b/c"),
            ("win\\dir\\file", "win/dir/file"),
            ("/x/../y", "y"),
            ("../../etc/passwd", "etc/passwd"),
            ("a/b/../../../c", "c"),
            (".", ""),
            ("./", ""),
            ("", ""),
            (".hidden", ".hidden"),
            ("...", "..."),
        ],
    )
    def test_examples(self, name: str, expected: str) -> None:
        """Test representative names."""
        assert normalize_entry_path(name) == expected

    @given(
        st.text(
            min_size=0,
            max_size=60,
            alphabet=st.sampled_from(["a", "b", ".", "/", "\\", " ", "-"]),
        )
    )
    def test_never_escapes_property(self, name: str) -> None:
        """Property-based test: results stay relative and canonical."""
        result = normalize_entry_path(name)

        assert not result.startswith("/")
        assert "\\" not in result
        assert "//" not in result
        if result:
            assert all(
                segment not in ("", ".", "..")
                for segment in result.split("/")
            )


class TestResolveOutputPath:
    """Test resolve_output_path joining and containment."""

    def test_joins_under_destination(self, tmp_path: Path) -> None:
        """Test the relative path is joined onto the destination."""
        assert (
            resolve_output_path(tmp_path, "/a/b.txt") == tmp_path / "a" / "b.txt"
        )

    def test_root_entry_maps_to_destination(self, tmp_path: Path) -> None:
        """Test an entry naming the archive root maps to the destination."""
        assert resolve_output_path(tmp_path, "./") == tmp_path

    def test_traversal_is_clamped(self, tmp_path: Path) -> None:
        """Test parent segments cannot leave the destination."""
        dest = tmp_path / "dest"

        assert resolve_output_path(dest, "../../x") == dest / "x"

    def test_symlinked_directory_escape_rejected(self, tmp_path: Path) -> None:
        """Test symlinks in the destination cannot redirect output."""
        dest = tmp_path / "dest"
        dest.mkdir()
        (dest / "out").symlink_to(tmp_path, target_is_directory=True)

        with pytest.raises(PathTraversalError) as exc_info:
            resolve_output_path(dest, "out/file")

        assert exc_info.value.path == dest / "out" / "file"

    def test_symlink_inside_destination_allowed(self, tmp_path: Path) -> None:
        """Test symlinks pointing inside the destination are fine."""
        dest = tmp_path / "dest"
        (dest / "real").mkdir(parents=True)
        (dest / "alias").symlink_to(dest / "real", target_is_directory=True)

        assert resolve_output_path(dest, "alias/f") == dest / "alias" / "f"
