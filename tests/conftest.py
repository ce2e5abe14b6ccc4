import logging
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from wp_deploy.models.config import DeployConfig
from wp_deploy.services.prompter import Prompter
from wp_deploy.services.release_service import ReleaseService
from wp_deploy.utils.file_utils import TemporaryWorkspace
from wp_deploy.vcs.memory import MemoryGit, MemorySvn

SLUG = "my-plugin"
SVN_URL = f"https://plugins.svn.wordpress.org/{SLUG}"

README = """=== My Plugin ===
Contributors: someone
Requires at least: 6.0
Stable tag: {version}
License: GPLv2

A plugin.
"""

HEADER = """<?php
/**
 * Plugin Name: My Plugin
 * Version: {version}
 */
"""


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep test output free of handler noise"""
    logging.getLogger().setLevel(logging.WARNING)
    yield


def plugin_files(version: str = "1.2.0", readme_version: Optional[str] = None) -> Dict[str, bytes]:
    """File tree of a tagged plugin release"""
    return {
        "readme.txt": README.format(version=readme_version or version).encode(),
        f"{SLUG}.php": HEADER.format(version=version).encode(),
        "includes/class-core.php": b"<?php class Core {}\n",
        "includes/helpers.php": b"<?php function helper() {}\n",
        "assets-wp-repo/banner-772x250.png": b"\x89PNG banner",
        "assets-wp-repo/icon-128x128.png": b"\x89PNG icon",
        "README.md": b"# dev readme\n",
        ".gitignore": b"node_modules\n*.log\n",
        "deploy.sh": b"#!/bin/sh\n",
        "debug.log": b"noise\n",
    }


def write_tree(root: Path, files: Dict[str, bytes]) -> None:
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)


class ScriptedPrompter(Prompter):
    """Answers prompts from queues and records what was asked"""

    def __init__(self, answers: Optional[List[str]] = None, confirms: Optional[List[bool]] = None):
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.questions: List[str] = []
        self.summaries: list = []

    def ask(self, question, default=None):
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {question}")
        return self.answers.pop(0)

    def confirm(self, question, default=False):
        self.questions.append(question)
        if not self.confirms:
            raise AssertionError(f"Unexpected confirmation: {question}")
        return self.confirms.pop(0)

    def show_summary(self, result, diff, working_copy):
        self.summaries.append((result, diff))


class TrackingWorkspace(TemporaryWorkspace):
    """Records every created temporary root"""

    created: List[Path] = []

    def __enter__(self):
        path = super().__enter__()
        TrackingWorkspace.created.append(path)
        return path


@pytest.fixture
def files():
    return plugin_files()


@pytest.fixture
def repo_root(tmp_path, files):
    root = tmp_path / "repo"
    write_tree(root, files)
    return root


@pytest.fixture
def git(files):
    return MemoryGit(branch="main", head=files)


@pytest.fixture
def svn():
    return MemorySvn(SVN_URL, files={
        "trunk/readme.txt": README.format(version="1.1.0").encode(),
        f"trunk/{SLUG}.php": HEADER.format(version="1.1.0").encode(),
        "trunk/includes/class-core.php": b"<?php class Core {}\n",
        "trunk/includes/legacy.php": b"<?php // removed in 1.2.0\n",
        "tags/1.1.0/readme.txt": README.format(version="1.1.0").encode(),
        "assets/banner-772x250.png": b"\x89PNG old banner",
        "assets/screenshot-1.png": b"\x89PNG old screenshot",
    })


@pytest.fixture
def workspaces():
    TrackingWorkspace.created = []
    return TrackingWorkspace


@pytest.fixture
def make_service(repo_root, git, svn, workspaces):
    def factory(prompter=None, config=None):
        return ReleaseService(
            config=config or DeployConfig(),
            repo_root=repo_root,
            git=git,
            svn=svn,
            prompter=prompter or ScriptedPrompter(),
            workspace_factory=workspaces
        )
    return factory
