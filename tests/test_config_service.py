"""Tests for configuration loading"""

import pytest

from wp_deploy.api.exceptions import ConfigError
from wp_deploy.constants import ALWAYS_EXCLUDED, PROJECT_CONFIG_FILE
from wp_deploy.models.config import DeployConfig
from wp_deploy.services.config_service import ConfigService


def test_defaults_without_project_file(tmp_path):
    config = ConfigService(tmp_path).config
    assert config.allowed_branches == ["main", "master"]
    assert config.svn_url("my-plugin") == "https://plugins.svn.wordpress.org/my-plugin"
    assert config.main_file("my-plugin") == "my-plugin.php"
    assert config.git_tag("1.0") == "v1.0"
    assert config.always_excluded == ALWAYS_EXCLUDED


def test_project_file_is_loaded(tmp_path):
    (tmp_path / PROJECT_CONFIG_FILE).write_text(
        "allowed_branches: release\n"
        "svn_url: https://svn.example.org/{slug}/\n"
        "git_tag_prefix: ''\n"
        "ignore_files: [.gitignore, .distignore]\n"
        "assets:\n"
        "  source_dir: .wordpress-org\n"
    )
    config = ConfigService(tmp_path).load_config()

    assert config.allowed_branches == ["release"]
    assert config.svn_url("demo") == "https://svn.example.org/demo"
    assert config.git_tag("1.0") == "1.0"
    assert config.ignore_files == [".gitignore", ".distignore"]
    assert config.assets.source_dir == ".wordpress-org"
    assert config.assets.target_dir == "assets"


def test_environment_variables_expand(tmp_path, monkeypatch):
    monkeypatch.setenv("RELEASE_BRANCH", "stable")
    (tmp_path / PROJECT_CONFIG_FILE).write_text("allowed_branches: [$RELEASE_BRANCH]\n")
    assert ConfigService(tmp_path).config.allowed_branches == ["stable"]


def test_explicit_missing_file_is_an_error(tmp_path):
    with pytest.raises(ConfigError):
        ConfigService(tmp_path, tmp_path / "nope.yaml").load_config()


@pytest.mark.parametrize("content", [
    "allowed_branches: [main\n",
    "- just\n- a list\n",
    "allowed_branches: {a: 1}\n",
    "assets: nope\n",
])
def test_invalid_content(tmp_path, content):
    (tmp_path / PROJECT_CONFIG_FILE).write_text(content)
    with pytest.raises(ConfigError):
        ConfigService(tmp_path).load_config()


def test_branch_override(tmp_path):
    config = ConfigService(tmp_path).with_overrides(["hotfix"])
    assert config.allowed_branches == ["hotfix"]


def test_round_trip_through_dict():
    config = DeployConfig(allowed_branches=["trunk-sync"], git_remote="upstream")
    assert DeployConfig.from_dict(config.to_dict()) == config
