"""Filesystem primitives used around icon generation.

Principles:
- SRP: only file and directory manipulation, no image knowledge.
- Errors are not swallowed; the one tolerated case is a glob whose directory
  does not exist.
"""
from __future__ import annotations

import fnmatch
import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO, List

logger = logging.getLogger(__name__)

_WILDCARDS = "*?["


class FileService:
    def __init__(self, dir_mode: int = 0o755) -> None:
        self.dir_mode = dir_mode

    def create_file(self, file_path: str | Path) -> BinaryIO:
        """Opens a file for binary writing, creating missing parent directories.

        The first attempt assumes the parent exists. Only when it does not are
        the directories created, followed by a single retry.

        Raises:
            OSError: if the file still cannot be created.
        """
        path = Path(file_path)
        try:
            return path.open("wb")
        except FileNotFoundError:
            logger.debug("Creating parent directories for %s", path)

        path.parent.mkdir(mode=self.dir_mode, parents=True, exist_ok=True)
        return path.open("wb")

    def read_dir_content(self, dir_path: str | Path) -> List[str]:
        """Returns names of the direct children of a directory."""
        return os.listdir(dir_path)

    def ensure_empty_dir(self, dir_path: str | Path) -> None:
        """Makes `dir_path` an existing, empty directory.

        A missing directory is created. An existing one keeps its inode and
        loses every direct child, subdirectories removed recursively.
        """
        path = Path(dir_path)
        try:
            names = os.listdir(path)
        except FileNotFoundError:
            logger.debug("Creating empty directory %s", path)
            path.mkdir(mode=self.dir_mode, parents=True, exist_ok=True)
            return

        for name in names:
            self._remove(path / name)

    def read_file(self, file_path: str | Path, size: int) -> bytes:
        """Reads at most `size` leading bytes of a file."""
        with open(file_path, "rb") as stream:
            return stream.read(size)

    def remove_by_glob(self, file_glob: str | Path) -> None:
        """Deletes files matching a pattern in one directory level.

        Only the last path component may contain wildcards. Without any, the
        exact path is removed. Directories that match are removed recursively.
        A missing directory is not an error.
        """
        path = Path(file_glob)
        pattern = path.name
        if not any(char in pattern for char in _WILDCARDS):
            try:
                self._remove(path)
            except FileNotFoundError:
                pass
            return

        try:
            names = os.listdir(path.parent)
        except FileNotFoundError:
            return

        for name in names:
            if fnmatch.fnmatchcase(name, pattern):
                self._remove(path.parent / name)

    @staticmethod
    def _remove(path: Path) -> None:
        logger.debug("Removing %s", path)
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
