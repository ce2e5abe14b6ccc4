"""Tests for file utilities"""

from wp_deploy.utils.file_utils import (
    TemporaryWorkspace,
    clear_tree,
    mirror_tree,
    prune_empty_dirs,
)

from .conftest import write_tree


def test_clear_tree_keeps_metadata(tmp_path):
    write_tree(tmp_path, {
        "a.php": b"a",
        "sub/b.php": b"b",
        ".svn/wc.db": b"db",
        "sub/.git/HEAD": b"ref",
    })
    removed = clear_tree(tmp_path)

    assert removed == ["a.php", "sub/b.php"]
    assert (tmp_path / ".svn/wc.db").exists()
    assert (tmp_path / "sub/.git/HEAD").exists()


def test_prune_empty_dirs(tmp_path):
    (tmp_path / "a/b/c").mkdir(parents=True)
    (tmp_path / "keep").mkdir()
    (tmp_path / "keep/file").write_bytes(b"x")
    (tmp_path / ".svn").mkdir()

    removed = prune_empty_dirs(tmp_path)

    assert removed == ["a/b/c", "a/b", "a"]
    assert (tmp_path / "keep").exists()
    assert (tmp_path / ".svn").exists()
    assert tmp_path.exists()


def test_mirror_tree_makes_exact_copy(tmp_path):
    source = tmp_path / "src"
    dest = tmp_path / "dst"
    write_tree(source, {"banner.png": b"new", "icons/icon.png": b"i"})
    write_tree(dest, {"banner.png": b"old", "stale.png": b"s", "olddir/x": b"x", ".svn/entries": b"e"})

    copied, removed = mirror_tree(source, dest)

    assert sorted(copied) == ["banner.png", "icons/icon.png"]
    assert removed == ["olddir", "stale.png"]
    assert (dest / "banner.png").read_bytes() == b"new"
    assert (dest / ".svn/entries").exists()
    assert not (dest / "stale.png").exists()


def test_mirror_tree_skips_identical_files(tmp_path):
    write_tree(tmp_path / "src", {"a": b"same"})
    write_tree(tmp_path / "dst", {"a": b"same"})
    copied, removed = mirror_tree(tmp_path / "src", tmp_path / "dst")
    assert copied == []
    assert removed == []


def test_temporary_workspace_removed_on_exit():
    with TemporaryWorkspace() as path:
        (path / "file").write_text("x")
        assert path.exists()
    assert not path.exists()


def test_temporary_workspace_removed_on_error():
    workspace = TemporaryWorkspace()
    try:
        with workspace as path:
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert not path.exists()


def test_temporary_workspace_keep():
    workspace = TemporaryWorkspace(keep=True)
    with workspace as path:
        pass
    assert path.exists()
    workspace.keep = False
    workspace.cleanup()
    assert not path.exists()
