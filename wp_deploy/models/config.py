"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Dict, List, Any

from ..constants import (
    ALWAYS_EXCLUDED,
    DEFAULT_ALLOWED_BRANCHES,
    DEFAULT_ASSET_SOURCE_DIR,
    DEFAULT_BANNER_PATTERN,
    DEFAULT_GIT_REMOTE,
    DEFAULT_GIT_TAG_PREFIX,
    DEFAULT_IGNORE_FILES,
    DEFAULT_MAIN_FILE_TEMPLATE,
    DEFAULT_README_FILE,
    DEFAULT_SVN_URL_TEMPLATE,
    SVN_ASSETS_DIR,
)


def _string_list(data: Dict[str, Any], key: str, default: List[str]) -> List[str]:
    value = data.get(key, default)
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return list(value)


@dataclass
class AssetConfig:
    """Distribution asset relocation settings"""

    source_dir: str = DEFAULT_ASSET_SOURCE_DIR  # inside trunk
    target_dir: str = SVN_ASSETS_DIR            # sibling of trunk
    banner_pattern: str = DEFAULT_BANNER_PATTERN

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "source_dir": self.source_dir,
            "target_dir": self.target_dir,
            "banner_pattern": self.banner_pattern
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AssetConfig':
        """Create from dictionary"""
        return cls(
            source_dir=data.get("source_dir", DEFAULT_ASSET_SOURCE_DIR),
            target_dir=data.get("target_dir", SVN_ASSETS_DIR),
            banner_pattern=data.get("banner_pattern", DEFAULT_BANNER_PATTERN)
        )


@dataclass
class DeployConfig:
    """Complete release configuration

    ``always_excluded`` is fixed policy and is not read from the project
    file; it is a field only so alternate policies can be injected.
    """

    allowed_branches: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_BRANCHES))
    svn_url_template: str = DEFAULT_SVN_URL_TEMPLATE
    git_remote: str = DEFAULT_GIT_REMOTE
    git_tag_prefix: str = DEFAULT_GIT_TAG_PREFIX
    readme_file: str = DEFAULT_README_FILE
    main_file_template: str = DEFAULT_MAIN_FILE_TEMPLATE
    ignore_files: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_FILES))
    always_excluded: List[str] = field(default_factory=lambda: list(ALWAYS_EXCLUDED))
    assets: AssetConfig = field(default_factory=AssetConfig)

    def svn_url(self, slug: str) -> str:
        """Get the centralized repository root URL for a plugin"""
        return self.svn_url_template.format(slug=slug).rstrip("/")

    def main_file(self, slug: str) -> str:
        """Get the plugin header file name for a plugin"""
        return self.main_file_template.format(slug=slug)

    def git_tag(self, version: str) -> str:
        """Get the distributed tag name for a release version"""
        return f"{self.git_tag_prefix}{version}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "allowed_branches": self.allowed_branches,
            "svn_url": self.svn_url_template,
            "git_remote": self.git_remote,
            "git_tag_prefix": self.git_tag_prefix,
            "readme_file": self.readme_file,
            "main_file": self.main_file_template,
            "ignore_files": self.ignore_files,
            "assets": self.assets.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeployConfig':
        """Create from dictionary

        Raises:
            ValueError: If a value has the wrong type
        """
        assets = data.get("assets", {})
        if not isinstance(assets, dict):
            raise ValueError("'assets' must be a mapping")

        return cls(
            allowed_branches=_string_list(data, "allowed_branches", DEFAULT_ALLOWED_BRANCHES),
            svn_url_template=str(data.get("svn_url", DEFAULT_SVN_URL_TEMPLATE)),
            git_remote=str(data.get("git_remote", DEFAULT_GIT_REMOTE)),
            git_tag_prefix=str(data.get("git_tag_prefix", DEFAULT_GIT_TAG_PREFIX)),
            readme_file=str(data.get("readme_file", DEFAULT_README_FILE)),
            main_file_template=str(data.get("main_file", DEFAULT_MAIN_FILE_TEMPLATE)),
            ignore_files=_string_list(data, "ignore_files", DEFAULT_IGNORE_FILES),
            assets=AssetConfig.from_dict(assets)
        )
