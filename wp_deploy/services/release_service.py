# wp_deploy/services/release_service.py
"""Release orchestration: git tag, SVN reconcile, commit and tag"""

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from .prompter import Prompter
from ..api.exceptions import (
    BranchNotAllowedError,
    DeployToolError,
    DirtyWorkingTreeError,
    DuplicateTagError,
    PreconditionError,
    SourceFileMissingError,
    UserCancelledError,
)
from ..constants import (
    ENV_SVN_USER,
    ErrorCode,
    PROMPT_COMMIT_MESSAGE,
    PROMPT_CONFIRM_COMMIT,
    PROMPT_CONFIRM_NO_BANNER,
    PROMPT_SLUG,
    PROMPT_SVN_USER,
    SLUG_PATTERN,
    SVN_TAGS_DIR,
    SVN_TRUNK_DIR,
)
from ..core.ignore_rules import IgnoreRules
from ..core.reconciler import Reconciler
from ..core.snapshot import SnapshotMaterializer
from ..core.version_extractor import ReleaseVersion, read_release_version, version_warnings
from ..models.config import DeployConfig
from ..models.result import CheckResult, ReleaseResult
from ..utils.file_utils import TemporaryWorkspace
from ..vcs.base import CentralizedVCS, DistributedVCS

logger = logging.getLogger(__name__)


@dataclass
class ReleaseOptions:
    """Answers supplied up front instead of prompting"""
    slug: Optional[str] = None
    svn_user: Optional[str] = None
    message: Optional[str] = None
    assume_yes: bool = False
    allow_missing_banner: bool = False
    dry_run: bool = False
    keep_workdir: bool = False
    check_remote: bool = True


@dataclass
class Preflight:
    """Outcome of the release precondition checks"""
    slug: str
    svn_url: str
    branch: Optional[str] = None
    version: Optional[ReleaseVersion] = None
    git_tag: Optional[str] = None
    checks: List[CheckResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)


class ReleaseService:
    """Sequences a git-to-SVN plugin release"""

    def __init__(self,
                 config: DeployConfig,
                 repo_root: Path,
                 git: DistributedVCS,
                 svn: CentralizedVCS,
                 prompter: Prompter,
                 workspace_factory: Callable[..., TemporaryWorkspace] = TemporaryWorkspace):
        """
        Initialize release service

        Args:
            config: Release configuration
            repo_root: Git repository root
            git: Distributed VCS collaborator
            svn: Centralized VCS collaborator
            prompter: Operator interaction
            workspace_factory: Creates the temporary root context
        """
        self.config = config
        self.repo_root = Path(repo_root)
        self.git = git
        self.svn = svn
        self.prompter = prompter
        self.workspace_factory = workspace_factory
        self.current_step = "startup"

    def _step(self, name: str) -> None:
        self.current_step = name
        logger.info(f"Step: {name}")

    # Preconditions

    def preflight(self, slug: str, stop_on_failure: bool = True,
                  check_remote: bool = True) -> Preflight:
        """
        Run every release precondition check

        Args:
            slug: Plugin slug
            stop_on_failure: Raise the first failure instead of recording it
            check_remote: Also query the centralized repository for the tag

        Returns:
            Preflight outcome

        Raises:
            PreconditionError: A check failed and stop_on_failure is set
        """
        result = Preflight(slug=slug, svn_url=self.config.svn_url(slug))

        def record(name: str, check: Callable[[], str]) -> bool:
            try:
                message = check()
            except PreconditionError as e:
                result.checks.append(CheckResult(name, False, str(e)))
                if stop_on_failure:
                    raise
                return False
            result.checks.append(CheckResult(name, True, message))
            return True

        readme_path = self.repo_root / self.config.readme_file
        header_path = self.repo_root / self.config.main_file(slug)

        def source_files() -> str:
            if not readme_path.is_file():
                raise SourceFileMissingError(str(readme_path), "readme.txt")
            if not header_path.is_file():
                raise SourceFileMissingError(str(header_path), "Main plugin file")
            return f"{readme_path.name} and {header_path.name} present"

        def working_tree() -> str:
            if not self.git.is_working_tree_clean():
                raise DirtyWorkingTreeError()
            return "Working tree is clean"

        def branch() -> str:
            result.branch = self.git.current_branch()
            if result.branch not in self.config.allowed_branches:
                raise BranchNotAllowedError(result.branch, self.config.allowed_branches)
            return f"On allowed branch '{result.branch}'"

        def version() -> str:
            result.version = read_release_version(readme_path, header_path)
            result.git_tag = self.config.git_tag(result.version.value)
            return f"Readme and header agree on {result.version}"

        def git_tag() -> str:
            if self.git.tag_exists(result.git_tag):
                raise DuplicateTagError(result.git_tag, "Git")
            return f"Git tag {result.git_tag} is free"

        def svn_tag() -> str:
            tag_url = f"{result.svn_url}/{SVN_TAGS_DIR}/{result.version}"
            if self.svn.remote_path_exists(tag_url):
                raise DuplicateTagError(str(result.version), "SVN")
            return f"SVN tag {result.version} is free"

        self._step("preflight checks")
        record("Source files", source_files)
        record("Working tree", working_tree)
        record("Branch", branch)
        if record("Version", version):
            record("Git tag", git_tag)
            if check_remote:
                record("SVN tag", svn_tag)
                existing = self.svn.list_directory(f"{result.svn_url}/{SVN_TAGS_DIR}")
                result.warnings.extend(version_warnings(result.version.value, existing))
            else:
                result.warnings.extend(version_warnings(result.version.value, []))

        for warning in result.warnings:
            logger.warning(warning)
        return result

    # Release

    def _resolve_slug(self, options: ReleaseOptions) -> str:
        slug = (options.slug or self.prompter.ask(PROMPT_SLUG) or "").strip()
        if not SLUG_PATTERN.match(slug):
            raise PreconditionError(f"Invalid plugin slug: '{slug}'", ErrorCode.INVALID_INPUT)
        return slug

    def _resolve_user(self, options: ReleaseOptions) -> str:
        user = options.svn_user or self.prompter.ask(
            PROMPT_SVN_USER, default=os.environ.get(ENV_SVN_USER)
        )
        user = (user or "").strip()
        if not user:
            raise PreconditionError("SVN username is required", ErrorCode.INVALID_INPUT)
        return user

    def _banner_gate(self, options: ReleaseOptions) -> Callable[[Path], bool]:
        def confirm(asset_dir: Path) -> bool:
            if options.allow_missing_banner:
                logger.warning("Continuing without a banner asset as requested")
                return True
            if options.assume_yes:
                return False
            return self.prompter.confirm(
                PROMPT_CONFIRM_NO_BANNER.format(path=asset_dir.name), default=False
            )
        return confirm

    def run(self, options: Optional[ReleaseOptions] = None) -> ReleaseResult:
        """
        Execute a release end to end

        Args:
            options: Pre-supplied answers and behaviour flags

        Returns:
            ReleaseResult on success or completed dry run

        Raises:
            DeployToolError: Any precondition, asset, operator or command
                failure; ``step`` names where it happened
        """
        options = options or ReleaseOptions()
        start_time = time.time()

        try:
            return self._run(options, start_time)
        except DeployToolError as e:
            if e.step is None:
                e.step = self.current_step
            raise

    def _run(self, options: ReleaseOptions, start_time: float) -> ReleaseResult:
        self._step("input")
        slug = self._resolve_slug(options)
        svn_user = self._resolve_user(options)

        preflight = self.preflight(slug, check_remote=options.check_remote)
        version = preflight.version.value
        git_tag = preflight.git_tag

        self._step("input")
        message = (options.message or self.prompter.ask(PROMPT_COMMIT_MESSAGE) or "").strip()
        if not message:
            raise PreconditionError("Release commit message is required", ErrorCode.INVALID_INPUT)

        if options.dry_run:
            revision = "HEAD"
            logger.info("Dry run: skipping git tag and push")
        else:
            self._step("git tag")
            self.git.create_annotated_tag(git_tag, message)
            self._step("git push")
            self.git.push_refs(preflight.branch, git_tag)
            revision = git_tag

        with self.workspace_factory(keep=options.keep_workdir) as tmp_root:
            working_copy = Path(tmp_root) / slug

            self._step("svn checkout")
            self.svn.checkout(preflight.svn_url, working_copy)
            if (working_copy / SVN_TAGS_DIR / version).exists():
                raise DuplicateTagError(version, "SVN")

            rules = IgnoreRules.from_files(
                [self.repo_root / f for f in self.config.ignore_files],
                self.config.always_excluded
            )
            reconciler = Reconciler(
                self.svn,
                working_copy,
                preflight.svn_url,
                self.config.assets,
                confirm_missing_banner=self._banner_gate(options)
            )

            self._step("svn propset")
            self.svn.set_ignore_property(working_copy / SVN_TRUNK_DIR, self.config.always_excluded)

            self._step("snapshot")
            reconciler.apply_snapshot(SnapshotMaterializer(self.git, rules), revision)

            self._step("reconcile")
            reconcile_result = reconciler.stage()

            self._step("review")
            diff = self.svn.diff(reconciler.trunk)
            self.prompter.show_summary(reconcile_result, diff, working_copy)

            result = ReleaseResult(
                slug=slug,
                version=version,
                git_tag=git_tag,
                dry_run=options.dry_run,
                reconcile=reconcile_result,
                warnings=list(preflight.warnings)
            )

            if options.dry_run:
                reconciler.abort("dry run")
                result.duration = time.time() - start_time
                return result

            if not (options.assume_yes or self.prompter.confirm(PROMPT_CONFIRM_COMMIT, default=False)):
                reconciler.abort("commit declined by operator")
                raise UserCancelledError("SVN commit declined; nothing was committed")

            self._step("svn commit")
            result.svn_tag_url = reconciler.commit(svn_user, message, version)
            result.committed = True

        result.duration = time.time() - start_time
        logger.info(f"Released {slug} {version}")
        return result
