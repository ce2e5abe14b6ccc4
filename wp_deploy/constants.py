"""Global constants for wp-deploy"""

import re

APP_NAME = "wp-deploy"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = ".wp-deploy.yaml"

# Release policy defaults
DEFAULT_ALLOWED_BRANCHES = ["main", "master"]
DEFAULT_GIT_REMOTE = "origin"
DEFAULT_GIT_TAG_PREFIX = "v"
DEFAULT_SVN_URL_TEMPLATE = "https://plugins.svn.wordpress.org/{slug}"

# Version sources
DEFAULT_README_FILE = "readme.txt"
DEFAULT_MAIN_FILE_TEMPLATE = "{slug}.php"
README_VERSION_LABEL = "Stable tag"
HEADER_VERSION_LABEL = "Version"
PLACEHOLDER_VERSION = "trunk"

# Ignore rules
DEFAULT_IGNORE_FILES = [".gitignore"]
ALWAYS_EXCLUDED = [
    ".git",
    ".gitignore",
    "deploy.sh",
    PROJECT_CONFIG_FILE,
    "README.md",
]

# Version-control metadata never touched while clearing a snapshot target
VCS_METADATA_DIRS = frozenset({".svn", ".git"})

# Centralized repository layout
SVN_TRUNK_DIR = "trunk"
SVN_TAGS_DIR = "tags"
SVN_ASSETS_DIR = "assets"

# Distribution assets
DEFAULT_ASSET_SOURCE_DIR = "assets-wp-repo"
DEFAULT_BANNER_PATTERN = "banner-*"

# Environment variables
ENV_SVN_USER = "WP_DEPLOY_SVN_USER"
ENV_LOG_LEVEL = "WP_DEPLOY_LOG_LEVEL"

# Validation patterns
SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "WD001"
    SOURCE_NOT_FOUND = "WD002"
    VERSION_NOT_FOUND = "WD003"
    PLACEHOLDER_VERSION = "WD004"
    VERSION_MISMATCH = "WD005"
    DIRTY_WORKING_TREE = "WD006"
    BRANCH_NOT_ALLOWED = "WD007"
    DUPLICATE_TAG = "WD008"
    MISSING_BANNER = "WD009"
    COMMAND_FAILED = "WD010"
    SNAPSHOT_FAILED = "WD011"
    INVALID_STATE = "WD012"
    USER_CANCELLED = "WD013"
    INVALID_INPUT = "WD014"


# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"

# Interactive prompts
PROMPT_SLUG = "Plugin Slug (e.g., 'my-awesome-plugin')"
PROMPT_SVN_USER = "SVN Username (your wordpress.org username)"
PROMPT_COMMIT_MESSAGE = "Release commit message"
PROMPT_CONFIRM_COMMIT = "Proceed with SVN commit?"
PROMPT_CONFIRM_NO_BANNER = "No banner asset found in {path}. Proceed anyway and sync assets without a banner?"
