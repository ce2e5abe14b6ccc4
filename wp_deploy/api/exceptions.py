"""Exception definitions for wp-deploy"""

from typing import List, Optional, Sequence

from ..constants import ErrorCode


class DeployToolError(Exception):
    """Base exception for wp-deploy"""

    def __init__(self, message: str, error_code: str = None, step: str = None):
        super().__init__(message)
        self.error_code = error_code
        self.step = step


class ConfigError(DeployToolError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class PreconditionError(DeployToolError):
    """A release precondition is not met; nothing has been mutated"""
    pass


class SourceFileMissingError(PreconditionError):
    """Required version source file does not exist"""

    def __init__(self, file_path: str, description: str):
        message = f"{description} not found: {file_path}"
        super().__init__(message, ErrorCode.SOURCE_NOT_FOUND)
        self.file_path = file_path


class DirtyWorkingTreeError(PreconditionError):
    """Git working tree has uncommitted changes"""

    def __init__(self):
        super().__init__(
            "Git working tree is dirty. Commit or stash changes first.",
            ErrorCode.DIRTY_WORKING_TREE
        )


class BranchNotAllowedError(PreconditionError):
    """Release attempted from a branch outside the allowed list"""

    def __init__(self, branch: Optional[str], allowed: Sequence[str]):
        message = (
            f"Releases must be from one of: {', '.join(allowed)} "
            f"(current branch: {branch or 'unknown'})"
        )
        super().__init__(message, ErrorCode.BRANCH_NOT_ALLOWED)
        self.branch = branch
        self.allowed = list(allowed)


class DuplicateTagError(PreconditionError):
    """Release tag already exists"""

    def __init__(self, tag: str, where: str):
        super().__init__(f"{where} tag {tag} already exists.", ErrorCode.DUPLICATE_TAG)
        self.tag = tag
        self.where = where


class VersionError(PreconditionError):
    """Release version could not be established"""
    pass


class VersionNotFound(VersionError):
    """No usable version declaration in a source"""

    def __init__(self, source: str, label: str):
        message = f"Failed to extract version information: no '{label}:' value in {source}"
        super().__init__(message, ErrorCode.VERSION_NOT_FOUND)
        self.source = source
        self.label = label


class PlaceholderVersion(VersionError):
    """Stable tag still points at trunk"""

    def __init__(self, value: str):
        super().__init__(
            f"Stable tag is '{value}'. Refusing to deploy.",
            ErrorCode.PLACEHOLDER_VERSION
        )
        self.value = value


class VersionMismatch(VersionError):
    """Readme and plugin header disagree"""

    def __init__(self, readme_version: str, header_version: str):
        message = (
            "Version mismatch:\n"
            f"  readme.txt:    {readme_version}\n"
            f"  plugin header: {header_version}"
        )
        super().__init__(message, ErrorCode.VERSION_MISMATCH)
        self.readme_version = readme_version
        self.header_version = header_version


class AssetIntegrityError(DeployToolError):
    """Asset subtree failed its banner sanity check"""

    def __init__(self, asset_dir: str, pattern: str):
        message = (
            f"No asset matching '{pattern}' found in {asset_dir}. "
            "Aborting to prevent asset wipe."
        )
        super().__init__(message, ErrorCode.MISSING_BANNER)
        self.asset_dir = asset_dir
        self.pattern = pattern


class SnapshotError(DeployToolError):
    """Snapshot could not be materialized"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SNAPSHOT_FAILED)


class ReconcileStateError(DeployToolError):
    """Reconciliation step invoked out of order"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_STATE)


class CommandError(DeployToolError):
    """External version-control command failed"""

    def __init__(self, step: str, argv: List[str], returncode: int, stderr: str = ""):
        detail = stderr.strip().splitlines()[-1] if stderr and stderr.strip() else ""
        message = f"{step} failed (exit code {returncode})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, ErrorCode.COMMAND_FAILED, step=step)
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr


class UserCancelledError(DeployToolError):
    """User cancelled the operation"""

    def __init__(self, message: str = "Operation cancelled by user"):
        super().__init__(message, ErrorCode.USER_CANCELLED)
