import os
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set

from .. import config
from ..models import FileRecord


class MediaScanner:
    """
    Walks a directory tree and yields a FileRecord for every regular file whose
    extension falls in one of the requested categories.

    Symlinks are followed. Unreadable directories and dangling links are
    logged and skipped; they never abort the walk. Each call to `scan` starts
    a fresh walk, so the result can be iterated again after the tree changes.
    """

    def scan(self,
             root: Path,
             categories: Iterable[str] = config.MEDIA_CATEGORIES,
             skip_dirs: Optional[Set[Path]] = None) -> Iterator[FileRecord]:
        wanted = frozenset(categories)
        for path in self._iter_files(Path(root), skip_dirs or set()):
            category = self.classify(path)
            if category in wanted:
                yield FileRecord(path=path, category=category)

    @staticmethod
    def classify(path: Path) -> Optional[str]:
        """Maps a path to its category by (case-insensitive) extension."""
        return config.EXT_TO_CATEGORY.get(path.suffix.lower())

    def _iter_files(self, root: Path, skip_dirs: Set[Path]) -> Iterator[Path]:
        """Depth-first walker using os.scandir, sorted for a stable order."""
        root = root.absolute()
        visited: Set[tuple] = set()
        stack = [root]
        while stack:
            current = stack.pop()
            if skip_dirs and any(sd == current or sd in current.parents for sd in skip_dirs):
                logging.debug(f"Skipping {current}")
                continue

            # Symlinked directories can point back up the tree
            try:
                st = current.stat()
            except OSError as e:
                logging.warning(f"Cannot stat directory {current}: {e}")
                continue
            key = (st.st_dev, st.st_ino)
            if key in visited:
                logging.debug(f"Already visited {current}, skipping symlink loop")
                continue
            visited.add(key)

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                logging.warning(f"Cannot read directory {current}: {e}")
                continue

            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            files = []
            for e in entries:
                try:
                    if e.is_dir():
                        dirs.append(Path(e.path))
                    elif e.is_file():
                        files.append(Path(e.path))
                    elif e.is_symlink():
                        logging.warning(f"Broken symlink skipped: {e.path}")
                except OSError as err:
                    logging.warning(f"Cannot inspect {e.path}: {err}")

            # Push dirs to stack (reversed so we process A before Z)
            for d in reversed(dirs):
                stack.append(d)

            for f in files:
                yield f
