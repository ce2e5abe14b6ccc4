"""In-memory version-control implementations

These fakes keep the "remote" side in dictionaries while operating on a
real local directory, so reconciliation logic can be exercised without a
Git remote or a Subversion server.
"""

import difflib
import fnmatch
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

from .base import CentralizedVCS, DistributedVCS, StatusCode, StatusEntry
from ..api.exceptions import CommandError
from ..constants import VCS_METADATA_DIRS

# Remote directory entries carry no content
DIRECTORY = None


@dataclass
class CommitRecord:
    """A commit accepted by the in-memory server"""
    revision: int
    username: str
    message: str
    changed: List[str]


class MemoryGit(DistributedVCS):
    """Git stand-in holding named file trees"""

    def __init__(self,
                 branch: Optional[str] = "main",
                 clean: bool = True,
                 head: Optional[Dict[str, bytes]] = None,
                 tags: Optional[Dict[str, Dict[str, bytes]]] = None):
        self.branch = branch
        self.clean = clean
        self.head = dict(head or {})
        self.tags = {name: dict(tree) for name, tree in (tags or {}).items()}
        self.tag_messages: Dict[str, str] = {}
        self.pushed: List[str] = []
        self.calls: List[str] = []

    def current_branch(self) -> Optional[str]:
        self.calls.append('current_branch')
        return self.branch

    def is_working_tree_clean(self) -> bool:
        self.calls.append('is_working_tree_clean')
        return self.clean

    def tag_exists(self, name: str) -> bool:
        self.calls.append('tag_exists')
        return name in self.tags

    def create_annotated_tag(self, name: str, message: str) -> None:
        self.calls.append('create_annotated_tag')
        if name in self.tags:
            raise CommandError("git tag", ['git', 'tag', '-a', name], 128,
                               f"fatal: tag '{name}' already exists")
        self.tags[name] = dict(self.head)
        self.tag_messages[name] = message

    def push_refs(self, branch: str, tag: str) -> None:
        self.calls.append('push_refs')
        self.pushed.extend([branch, tag])

    def export_revision(self, ref: str, target_dir: Path) -> List[str]:
        self.calls.append('export_revision')
        if ref == 'HEAD':
            tree = self.head
        elif ref in self.tags:
            tree = self.tags[ref]
        else:
            raise CommandError("git archive", ['git', 'archive', ref], 128,
                               f"fatal: not a valid object name: {ref}")

        for rel_path, content in tree.items():
            dest = Path(target_dir) / rel_path
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(content)
        return sorted(tree)


class MemorySvn(CentralizedVCS):
    """Subversion stand-in with a dictionary-backed server

    Remote paths are repository-relative POSIX strings ("trunk/a.php")
    mapped to file content, or to ``None`` for directories. One working
    copy is supported at a time, which is all a release run needs.
    """

    def __init__(self, root_url: str, files: Optional[Dict[str, bytes]] = None,
                 layout: Sequence[str] = ("trunk", "tags", "assets")):
        self.root_url = root_url.rstrip('/')
        self.remote: Dict[str, Optional[bytes]] = {d: DIRECTORY for d in layout}
        for rel_path, content in (files or {}).items():
            self._put_remote(rel_path, content)

        self.revision = 1
        self.commits: List[CommitRecord] = []
        self.copies: List[tuple] = []
        self.ignore_props: Dict[str, List[str]] = {}
        self.fail_on: Dict[str, str] = {}  # "add:trunk/x" -> error text
        self.calls: List[str] = []

        self.wc_root: Optional[Path] = None
        self._wc_prefix = ''
        self._base: Dict[str, Optional[bytes]] = {}
        self._tracked: Set[str] = set()
        self._added: Set[str] = set()
        self._deleted: Set[str] = set()

    # Remote helpers

    def _put_remote(self, rel_path: str, content: Optional[bytes]) -> None:
        parts = rel_path.split('/')
        for i in range(1, len(parts)):
            self.remote.setdefault('/'.join(parts[:i]), DIRECTORY)
        self.remote[rel_path] = content

    def _url_to_rel(self, url: str) -> str:
        url = url.rstrip('/')
        if url != self.root_url and not url.startswith(self.root_url + '/'):
            raise CommandError("svn", ['svn', url], 1, f"svn: E170000: URL '{url}' doesn't exist")
        return url[len(self.root_url):].strip('/')

    def _remote_children(self, rel_dir: str) -> List[str]:
        prefix = f"{rel_dir}/" if rel_dir else ''
        return sorted(
            p[len(prefix):] for p in self.remote
            if p.startswith(prefix) and p != rel_dir and '/' not in p[len(prefix):]
        )

    # Working copy helpers

    def _wc_rel(self, path: Path) -> str:
        if self.wc_root is None:
            raise CommandError("svn", ['svn', str(path)], 1, "svn: E155007: not a working copy")
        try:
            rel = Path(path).resolve().relative_to(self.wc_root.resolve()).as_posix()
        except ValueError:
            raise CommandError("svn", ['svn', str(path)], 1,
                               f"svn: E155007: '{path}' is not a working copy")
        rel = '' if rel == '.' else rel
        return '/'.join(p for p in (self._wc_prefix, rel) if p)

    def _local(self, rel: str) -> Path:
        if self._wc_prefix:
            rel = rel[len(self._wc_prefix):].lstrip('/')
        return self.wc_root / rel if rel else self.wc_root

    @staticmethod
    def _under(rel: str, parent: str) -> bool:
        return not parent or rel == parent or rel.startswith(parent + '/')

    def _on_disk(self, parent: str) -> Dict[str, Optional[bytes]]:
        found = {}
        root = self._local(parent)
        if not root.exists():
            return found
        if root.is_file():
            return {parent: root.read_bytes()}
        found[parent] = DIRECTORY
        for path in sorted(root.rglob('*')):
            if any(part in VCS_METADATA_DIRS for part in path.relative_to(self.wc_root).parts):
                continue
            rel = self._wc_rel(path)
            found[rel] = DIRECTORY if path.is_dir() else path.read_bytes()
        return found

    def _is_ignored(self, rel: str) -> bool:
        parent, _, name = rel.rpartition('/')
        return any(fnmatch.fnmatchcase(name, p) for p in self.ignore_props.get(parent, []))

    def _check_failure(self, action: str, rel: str) -> None:
        error = self.fail_on.get(f"{action}:{rel}")
        if error:
            raise CommandError(f"svn {action}", ['svn', action, rel], 1, error)

    # CentralizedVCS

    def checkout(self, url: str, local_dir: Path) -> None:
        self.calls.append('checkout')
        prefix = self._url_to_rel(url)
        if prefix and prefix not in self.remote:
            raise CommandError("svn checkout", ['svn', 'checkout', url], 1,
                               f"svn: E170000: URL '{url}' doesn't exist")

        local_dir = Path(local_dir)
        local_dir.mkdir(parents=True, exist_ok=True)
        (local_dir / '.svn').mkdir(exist_ok=True)
        self.wc_root = local_dir
        self._wc_prefix = prefix

        self._base = {p: c for p, c in self.remote.items() if self._under(p, prefix) and p != prefix}
        for rel_path, content in self._base.items():
            dest = self._local(rel_path)
            if content is DIRECTORY:
                dest.mkdir(parents=True, exist_ok=True)
            else:
                dest.parent.mkdir(parents=True, exist_ok=True)
                dest.write_bytes(content)
        self._tracked = set(self._base) | {prefix}
        self._added = set()
        self._deleted = set()

    def remote_path_exists(self, url: str) -> bool:
        self.calls.append('remote_path_exists')
        try:
            rel = self._url_to_rel(url)
        except CommandError:
            return False
        return rel == '' or rel in self.remote

    def list_directory(self, url: str) -> List[str]:
        self.calls.append('list_directory')
        return self._remote_children(self._url_to_rel(url))

    def status(self, local_dir: Path) -> List[StatusEntry]:
        self.calls.append('status')
        parent = self._wc_rel(local_dir)
        disk = self._on_disk(parent)
        entries = []

        for rel in sorted(p for p in self._tracked if self._under(p, parent)):
            if rel in self._deleted:
                entries.append(StatusEntry(StatusCode.DELETED, self._local(rel)))
            elif rel not in disk:
                entries.append(StatusEntry(StatusCode.MISSING, self._local(rel)))
            elif rel in self._added:
                entries.append(StatusEntry(StatusCode.ADDED, self._local(rel)))
            elif disk[rel] is not DIRECTORY and disk[rel] != self._base.get(rel):
                entries.append(StatusEntry(StatusCode.MODIFIED, self._local(rel)))

        for rel in sorted(disk):
            if rel in self._tracked or self._is_ignored(rel):
                continue
            # Only the topmost unversioned path is reported
            if rel.rpartition('/')[0] in self._tracked or rel == parent:
                entries.append(StatusEntry(StatusCode.UNTRACKED, self._local(rel)))

        return sorted(entries, key=lambda e: str(e.path))

    def add(self, path: Path) -> None:
        self.calls.append('add')
        rel = self._wc_rel(path)
        self._check_failure('add', rel)
        if rel in self._tracked:
            raise CommandError("svn add", ['svn', 'add', rel], 1,
                               f"svn: warning: W150002: '{rel}' is already under version control")
        if not self._local(rel).exists():
            raise CommandError("svn add", ['svn', 'add', rel], 1,
                               f"svn: warning: W155010: '{rel}' not found")
        for new_rel in self._on_disk(rel):
            if self._is_ignored(new_rel) and new_rel != rel:
                continue
            parts = new_rel.split('/')
            for i in range(1, len(parts)):
                ancestor = '/'.join(parts[:i])
                if ancestor not in self._tracked:
                    self._tracked.add(ancestor)
                    self._added.add(ancestor)
            self._tracked.add(new_rel)
            self._added.add(new_rel)

    def delete(self, path: Path, force: bool = True) -> None:
        self.calls.append('delete')
        rel = self._wc_rel(path)
        self._check_failure('delete', rel)
        if rel not in self._tracked:
            raise CommandError("svn delete", ['svn', 'delete', rel], 1,
                               f"svn: E155010: '{rel}' is not under version control")
        if rel in self._added and not force:
            raise CommandError("svn delete", ['svn', 'delete', rel], 1,
                               f"svn: E195006: '{rel}' has local modifications")

        for tracked in [p for p in self._tracked if self._under(p, rel)]:
            if tracked in self._added:
                self._tracked.discard(tracked)
                self._added.discard(tracked)
            else:
                self._deleted.add(tracked)

        local = self._local(rel)
        if local.is_dir():
            shutil.rmtree(local)
        elif local.exists():
            local.unlink()

    def set_ignore_property(self, directory: Path, patterns: Sequence[str]) -> None:
        self.calls.append('set_ignore_property')
        self.ignore_props[self._wc_rel(directory)] = list(patterns)

    def diff(self, local_dir: Path) -> str:
        self.calls.append('diff')
        chunks = []
        for entry in self.status(local_dir):
            rel = self._wc_rel(entry.path)
            if entry.code not in (StatusCode.MODIFIED, StatusCode.ADDED, StatusCode.DELETED):
                continue
            if entry.path.is_dir() or self._base.get(rel, b'') is DIRECTORY:
                continue
            old = (self._base.get(rel) or b'').decode('utf-8', errors='replace')
            new = entry.path.read_bytes().decode('utf-8', errors='replace') if entry.path.is_file() else ''
            chunks.append(f"Index: {rel}\n")
            chunks.extend(difflib.unified_diff(
                old.splitlines(keepends=True), new.splitlines(keepends=True),
                fromfile=f"{rel} (revision {self.revision})",
                tofile=f"{rel} (working copy)"
            ))
        return ''.join(chunks)

    def commit(self, local_dir: Path, username: str, message: str) -> None:
        self.calls.append('commit')
        parent = self._wc_rel(local_dir)
        disk = self._on_disk(parent)
        changed = []

        for rel in sorted(p for p in self._deleted if self._under(p, parent)):
            self.remote.pop(rel, None)
            self._base.pop(rel, None)
            self._tracked.discard(rel)
            self._deleted.discard(rel)
            changed.append(rel)

        for rel in sorted(p for p in self._tracked if self._under(p, parent)):
            if rel not in disk or rel == self._wc_prefix:
                continue
            if rel in self._added or disk[rel] != self._base.get(rel):
                self._put_remote(rel, disk[rel])
                self._base[rel] = disk[rel]
                self._added.discard(rel)
                changed.append(rel)

        self.revision += 1
        self.commits.append(CommitRecord(self.revision, username, message, changed))

    def copy(self, src_url: str, dst_url: str, message: str, username: str) -> None:
        self.calls.append('copy')
        src = self._url_to_rel(src_url)
        dst = self._url_to_rel(dst_url)
        if src not in self.remote:
            raise CommandError("svn copy", ['svn', 'copy', src_url, dst_url], 1,
                               f"svn: E170000: Path '{src}' does not exist")
        if dst in self.remote:
            raise CommandError("svn copy", ['svn', 'copy', src_url, dst_url], 1,
                               f"svn: E160020: Path '{dst}' already exists")

        for rel in [p for p in self.remote if self._under(p, src)]:
            self._put_remote(dst + rel[len(src):], self.remote[rel])
        self.revision += 1
        self.copies.append((src, dst, message, username))
        self.commits.append(CommitRecord(self.revision, username, message, [dst]))

    # Inspection helpers for tests

    def remote_files(self, prefix: str) -> Dict[str, bytes]:
        """Get committed files below a remote directory, relative to it"""
        prefix = prefix.strip('/')
        return {
            p[len(prefix) + 1:]: c for p, c in self.remote.items()
            if p.startswith(prefix + '/') and c is not DIRECTORY
        }
