"""Tests for the command-line interface"""

import importlib

import pytest
from click.testing import CliRunner

from wp_deploy.__version__ import __version__
from wp_deploy.cli.commands import release as release_module
from wp_deploy.cli.main import cli

from .conftest import README, SLUG

# The package re-exports the main() function under the same name
main_module = importlib.import_module("wp_deploy.cli.main")


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def wired(monkeypatch, repo_root, git, svn):
    """Point the CLI at the test repository and in-memory VCS"""
    monkeypatch.setattr(main_module, 'find_repository_root', lambda path: repo_root)
    monkeypatch.setattr(release_module, 'GitClient', lambda root, remote: git)
    monkeypatch.setattr(release_module, 'SvnClient', lambda non_interactive=False: svn)
    return ['--repo', str(repo_root)]


def test_version(runner):
    result = runner.invoke(cli, ['--version'])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_package_metadata():
    package = importlib.import_module("wp_deploy")
    assert package.__version_info__ == tuple(int(p) for p in __version__.split("."))
    assert package.__license__ == "MIT"
    assert not hasattr(package, "__author__")
    assert not hasattr(package, "__email__")


def test_help_lists_commands(runner):
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'release' in result.output
    assert 'check' in result.output


def test_check_passes(runner, wired):
    result = runner.invoke(cli, [*wired, 'check', '--slug', SLUG])
    assert result.exit_code == 0, result.output
    assert 'Ready to release' in result.output


def test_check_reports_mismatch(runner, wired, repo_root):
    (repo_root / "readme.txt").write_text(README.format(version="1.2.1"))
    result = runner.invoke(cli, [*wired, 'check', '--slug', SLUG, '--offline'])
    assert result.exit_code == 1
    assert 'FAIL' in result.output


def test_check_branch_override(runner, wired):
    result = runner.invoke(cli, [*wired, 'check', '--slug', SLUG, '-b', 'release'])
    assert result.exit_code == 1


def test_release_with_flags(runner, wired, git, svn):
    result = runner.invoke(cli, [
        *wired, 'release', '--slug', SLUG, '-u', 'alice', '-m', 'Release 1.2.0', '--yes'
    ])
    assert result.exit_code == 0, result.output
    assert 'Deployment complete' in result.output
    assert git.pushed == ['main', 'v1.2.0']
    assert svn.copies[0][1] == 'tags/1.2.0'


def test_release_declined_at_prompt(runner, wired, svn):
    result = runner.invoke(
        cli,
        [*wired, 'release', '--slug', SLUG, '-u', 'alice', '-m', 'Release 1.2.0'],
        input='n\n'
    )
    assert result.exit_code == 1
    assert svn.commits == []


def test_release_dry_run(runner, wired, git, svn):
    result = runner.invoke(cli, [
        *wired, 'release', '--slug', SLUG, '-u', 'alice', '-m', 'x', '--dry-run'
    ])
    assert result.exit_code == 0, result.output
    assert 'Dry run complete' in result.output
    assert git.tags == {}
    assert svn.commits == []


def test_release_error_shows_step(runner, wired, git):
    git.clean = False
    result = runner.invoke(cli, [
        *wired, 'release', '--slug', SLUG, '-u', 'alice', '-m', 'x', '--yes'
    ])
    assert result.exit_code == 1
    assert 'preflight checks' in result.output
    assert 'WD006' in result.output


def test_outside_repository(runner, monkeypatch, tmp_path):
    monkeypatch.setattr(main_module, 'find_repository_root', lambda path: None)
    result = runner.invoke(cli, ['--repo', str(tmp_path), 'check', '--slug', SLUG])
    assert result.exit_code == 1
    assert 'Not inside a Git repository' in result.output
