"""Multi-threaded, cancellable directory walk.

A fixed-size thread pool lists directories and visits entries. Every
sub-directory listing and every accepted file visit is its own pool task, so
files in one directory are visited in parallel. The visitor may be called
from any worker concurrently and stops the whole walk by returning
``WalkState.QUIT``.
"""

import os
import stat
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable


class WalkState(Enum):
    CONTINUE = "continue"
    QUIT = "quit"


class FileType(Enum):
    FILE = "file"
    DIR = "dir"
    OTHER = "other"


@dataclass(frozen=True)
class DirEntry:
    path: Path
    depth: int
    file_type: FileType | None
    error: OSError | None = None

    def is_file(self) -> bool:
        return self.file_type is FileType.FILE

    def is_dir(self) -> bool:
        return self.file_type is FileType.DIR


class WalkError(Exception):
    """A directory or entry the walk could not read."""

    def __init__(self, path: Path, cause: OSError | str):
        self.path = path
        reason = (cause.strerror or str(cause)) if isinstance(cause, OSError) else cause
        super().__init__(f"{path}: {reason}")


Visitor = Callable[[DirEntry | WalkError], WalkState]


@dataclass(frozen=True)
class _Job:
    path: Path
    depth: int
    # (st_dev, st_ino) of every directory from the root down to this one
    ancestors: tuple[tuple[int, int], ...]


class ParallelWalker:
    def __init__(
        self,
        root: Path,
        max_depth: int | None = None,
        follow_links: bool = False,
        same_file_system: bool = False,
        threads: int = 1,
        file_filter: Callable[[Path], bool] | None = None,
    ):
        self.root = Path(root)
        self.max_depth = max_depth
        self.follow_links = follow_links
        self.same_file_system = same_file_system
        self.threads = max(1, threads)
        self.file_filter = file_filter

        self._executor: ThreadPoolExecutor | None = None
        self._pending = 0
        self._pending_lock = threading.Lock()
        self._idle = threading.Event()
        self._quit = threading.Event()
        self._failure: Exception | None = None
        self._failure_lock = threading.Lock()
        self._root_dev: int | None = None

    def run(self, visitor: Visitor) -> None:
        """Walk the tree, blocking until every worker has finished."""
        root_job = self._visit_root(visitor)
        if root_job is not None:
            with ThreadPoolExecutor(max_workers=self.threads, thread_name_prefix="walker") as executor:
                self._executor = executor
                self._submit(self._read_dir, root_job, visitor)
                self._idle.wait()
            self._executor = None

        if self._failure is not None:
            raise self._failure

    def _visit_root(self, visitor: Visitor) -> _Job | None:
        try:
            root_st = self.root.stat()
        except OSError as e:
            self._dispatch(visitor, WalkError(self.root, e))
            return None

        self._root_dev = root_st.st_dev
        if stat.S_ISDIR(root_st.st_mode):
            entry = DirEntry(self.root, 0, FileType.DIR)
        elif stat.S_ISREG(root_st.st_mode):
            entry = DirEntry(self.root, 0, FileType.FILE)
        else:
            entry = DirEntry(self.root, 0, FileType.OTHER)

        if not entry.is_dir():
            if self._accepts(entry):
                self._dispatch(visitor, entry)
            return None

        self._dispatch(visitor, entry)
        if self._quit.is_set() or not self._may_descend(0):
            return None
        return _Job(self.root, 0, ((root_st.st_dev, root_st.st_ino),))

    def _submit(self, fn, *args) -> None:
        with self._pending_lock:
            self._pending += 1
        self._executor.submit(self._run_task, fn, *args)

    def _run_task(self, fn, *args) -> None:
        try:
            if not self._quit.is_set():
                fn(*args)
        except Exception as e:
            self._fail(e)
        finally:
            with self._pending_lock:
                self._pending -= 1
                # children are submitted before their parent task finishes
                if self._pending == 0:
                    self._idle.set()

    def _read_dir(self, job: _Job, visitor: Visitor) -> None:
        try:
            with os.scandir(job.path) as it:
                children = list(it)
        except OSError as e:
            self._dispatch(visitor, WalkError(job.path, e))
            return

        depth = job.depth + 1
        for child in children:
            if self._quit.is_set():
                return
            path = Path(child.path)
            entry = self._resolve(child, path, depth)

            if not entry.is_dir():
                if self._accepts(entry):
                    self._submit(self._dispatch, visitor, entry)
                continue

            try:
                st = child.stat(follow_symlinks=self.follow_links)
            except OSError as e:
                self._dispatch(visitor, DirEntry(path, depth, None, e))
                continue
            if self.same_file_system and st.st_dev != self._root_dev:
                continue

            key = (st.st_dev, st.st_ino)
            if key in job.ancestors:
                self._dispatch(visitor, WalkError(path, "file system loop found"))
                continue

            self._dispatch(visitor, entry)
            if not self._quit.is_set() and self._may_descend(depth):
                self._submit(self._read_dir, _Job(path, depth, job.ancestors + (key,)), visitor)

    def _resolve(self, child: os.DirEntry, path: Path, depth: int) -> DirEntry:
        try:
            if child.is_symlink() and self.follow_links:
                # surfaces broken links as entry errors
                child.stat(follow_symlinks=True)
            if child.is_dir(follow_symlinks=self.follow_links):
                kind = FileType.DIR
            elif child.is_file(follow_symlinks=self.follow_links):
                kind = FileType.FILE
            else:
                kind = FileType.OTHER
        except OSError as e:
            return DirEntry(path, depth, None, e)
        return DirEntry(path, depth, kind)

    def _accepts(self, entry: DirEntry) -> bool:
        if self.max_depth is not None and entry.depth > self.max_depth:
            return False
        return self.file_filter is None or self.file_filter(entry.path)

    def _may_descend(self, depth: int) -> bool:
        return self.max_depth is None or depth < self.max_depth

    def _dispatch(self, visitor: Visitor, item: DirEntry | WalkError) -> None:
        if self._quit.is_set():
            return
        if visitor(item) is WalkState.QUIT:
            self._quit.set()

    def _fail(self, exc: Exception) -> None:
        with self._failure_lock:
            if self._failure is None:
                self._failure = exc
        self._quit.set()
