"""Tests for the command-line VCS clients"""

import io
import subprocess
import sys
import tarfile
from pathlib import Path

import pytest

from wp_deploy.api.exceptions import CommandError, SnapshotError
from wp_deploy.vcs import git as git_module
from wp_deploy.vcs import svn as svn_module
from wp_deploy.vcs.base import StatusCode, run_command
from wp_deploy.vcs.git import GitClient
from wp_deploy.vcs.svn import SvnClient, parse_status


class FakeRunner:
    """Records argv and returns canned output"""

    def __init__(self, stdout="", returncode=0):
        self.stdout = stdout
        self.returncode = returncode
        self.calls = []

    def __call__(self, argv, step, **kwargs):
        self.calls.append((list(argv), step, kwargs))
        if kwargs.get('check', True) and self.returncode != 0:
            raise CommandError(step, argv, self.returncode, "failed")
        return subprocess.CompletedProcess(argv, self.returncode, stdout=self.stdout, stderr="")


def make_tar(members, symlinks=None):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode='w') as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
        for name, target in (symlinks or {}).items():
            info = tarfile.TarInfo(name)
            info.type = tarfile.SYMTYPE
            info.linkname = target
            tar.addfile(info)
    return buffer.getvalue()


class TestRunCommand:

    def test_missing_executable(self):
        with pytest.raises(CommandError) as exc_info:
            run_command(["wp-deploy-no-such-binary"], step="probe")
        assert exc_info.value.returncode == 127
        assert exc_info.value.step == "probe"

    def test_failure_reports_last_stderr_line(self):
        argv = [sys.executable, "-c",
                "import sys; sys.stderr.write('first\\nlast line\\n'); sys.exit(3)"]
        with pytest.raises(CommandError) as exc_info:
            run_command(argv, step="script")
        assert exc_info.value.returncode == 3
        assert str(exc_info.value) == "script failed (exit code 3): last line"

    def test_unchecked_failure_returns_result(self):
        result = run_command([sys.executable, "-c", "raise SystemExit(2)"], step="s", check=False)
        assert result.returncode == 2


class TestParseStatus:

    def test_parses_codes_and_paths(self, tmp_path):
        output = (
            "?       trunk/new.php\n"
            "!       trunk/old.php\n"
            "M       trunk/readme.txt\n"
            "A  +    trunk/copied.php\n"
            "Performing status on external item at 'x'\n"
        )
        entries = parse_status(output, tmp_path)
        assert [(e.code, e.path) for e in entries] == [
            (StatusCode.UNTRACKED, tmp_path / "trunk/new.php"),
            (StatusCode.MISSING, tmp_path / "trunk/old.php"),
            (StatusCode.MODIFIED, tmp_path / "trunk/readme.txt"),
            (StatusCode.ADDED, tmp_path / "trunk/copied.php"),
        ]

    def test_absolute_paths_kept(self, tmp_path):
        absolute = tmp_path / "wc" / "file.php"
        entries = parse_status(f"?       {absolute}\n", Path("/elsewhere"))
        assert entries[0].path == absolute

    def test_paths_with_spaces(self, tmp_path):
        entries = parse_status("?       my file.php\n", tmp_path)
        assert entries[0].path == tmp_path / "my file.php"


class TestSvnClient:

    def test_commit_and_copy_commands(self, monkeypatch, tmp_path):
        runner = FakeRunner()
        monkeypatch.setattr(svn_module, 'run_command', runner)
        client = SvnClient()

        client.commit(tmp_path, "alice", "Release 1.0")
        client.copy("u/trunk", "u/tags/1.0", "Tag 1.0", "alice")

        assert runner.calls[0][0] == ['svn', 'commit', str(tmp_path), '--username', 'alice', '-m', 'Release 1.0']
        assert runner.calls[0][2]['interactive'] is True
        assert runner.calls[1][0] == ['svn', 'copy', 'u/trunk', 'u/tags/1.0', '-m', 'Tag 1.0', '--username', 'alice']

    def test_non_interactive_flag(self, monkeypatch, tmp_path):
        runner = FakeRunner()
        monkeypatch.setattr(svn_module, 'run_command', runner)
        SvnClient(non_interactive=True).delete(tmp_path / "x", force=True)
        assert runner.calls[0][0] == ['svn', 'delete', '--quiet', '--force', str(tmp_path / "x"), '--non-interactive']

    def test_ignore_property_is_newline_separated(self, monkeypatch, tmp_path):
        runner = FakeRunner()
        monkeypatch.setattr(svn_module, 'run_command', runner)
        SvnClient().set_ignore_property(tmp_path, [".git", "README.md"])
        assert runner.calls[0][0] == ['svn', 'propset', 'svn:ignore', '.git\nREADME.md', str(tmp_path)]

    def test_list_directory(self, monkeypatch):
        monkeypatch.setattr(svn_module, 'run_command', FakeRunner(stdout="1.0.0/\n1.1.0/\n"))
        assert SvnClient().list_directory("u/tags") == ["1.0.0", "1.1.0"]

    def test_list_directory_failure_is_empty(self, monkeypatch):
        monkeypatch.setattr(svn_module, 'run_command', FakeRunner(returncode=1))
        assert SvnClient().list_directory("u/tags") == []

    def test_remote_path_exists(self, monkeypatch):
        monkeypatch.setattr(svn_module, 'run_command', FakeRunner(returncode=1))
        assert SvnClient().remote_path_exists("u/tags/9.9") is False


class TestGitClient:

    def test_tag_exists_uses_return_code(self, monkeypatch, tmp_path):
        monkeypatch.setattr(git_module, 'run_command', FakeRunner(returncode=1))
        assert GitClient(tmp_path).tag_exists("v1.0") is False

    def test_push_branch_then_tag(self, monkeypatch, tmp_path):
        runner = FakeRunner()
        monkeypatch.setattr(git_module, 'run_command', runner)
        GitClient(tmp_path, remote="upstream").push_refs("main", "v1.0")
        assert [c[0] for c in runner.calls] == [
            ['git', 'push', 'upstream', 'main'],
            ['git', 'push', 'upstream', 'v1.0'],
        ]

    def test_dirty_working_tree(self, monkeypatch, tmp_path):
        monkeypatch.setattr(git_module, 'run_command', FakeRunner(stdout=" M readme.txt\n"))
        assert GitClient(tmp_path).is_working_tree_clean() is False

    def test_export_revision_extracts_archive(self, monkeypatch, tmp_path):
        archive = make_tar({"readme.txt": b"Stable tag: 1.0\n", "src/a.php": b"<?php\n"})
        monkeypatch.setattr(git_module, 'run_command', FakeRunner(stdout=archive))

        written = GitClient(tmp_path).export_revision("v1.0", tmp_path / "out")

        assert sorted(written) == ["readme.txt", "src/a.php"]
        assert (tmp_path / "out/src/a.php").read_bytes() == b"<?php\n"

    def test_export_revision_rejects_escaping_members(self, monkeypatch, tmp_path):
        archive = make_tar({"../evil.php": b"x"})
        monkeypatch.setattr(git_module, 'run_command', FakeRunner(stdout=archive))

        with pytest.raises(SnapshotError):
            GitClient(tmp_path).export_revision("v1.0", tmp_path / "out")

    def test_export_revision_rejects_absolute_symlink(self, monkeypatch, tmp_path):
        archive = make_tar({"readme.txt": b"r"}, symlinks={"bin/tool": "/usr/bin/env"})
        monkeypatch.setattr(git_module, 'run_command', FakeRunner(stdout=archive))

        with pytest.raises(SnapshotError) as exc_info:
            GitClient(tmp_path).export_revision("v1.0", tmp_path / "out")
        assert "Cannot extract v1.0" in str(exc_info.value)
        assert not (tmp_path / "out/bin/tool").is_symlink()

    def test_export_revision_corrupt_archive(self, monkeypatch, tmp_path):
        monkeypatch.setattr(git_module, 'run_command', FakeRunner(stdout=b"not a tar archive" * 64))

        with pytest.raises(SnapshotError):
            GitClient(tmp_path).export_revision("v1.0", tmp_path / "out")

    def test_interpreter_supports_extraction_filters(self):
        assert hasattr(tarfile, 'data_filter')
