import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

from tqdm import tqdm

from . import config
from .exceptions import HashIoError
from .models import FileRecord
from .paths import check_directory
from .scanning.filesystem import MediaScanner
from .scanning.hasher import FileHasher


class Reconciler:
    """
    Finds candidate files that have no content-identical copy in a reference tree.

    The reference tree is hashed once per instance and cached, so every
    candidate costs one hash plus a set lookup. File names and locations play
    no part in the comparison.
    """

    def __init__(self,
                 scanner: Optional[MediaScanner] = None,
                 hasher: Optional[FileHasher] = None,
                 show_progress: bool = True):
        self.scanner = scanner or MediaScanner()
        self.hasher = hasher or FileHasher()
        self.show_progress = show_progress
        self._reference_hashes: Optional[Set[str]] = None
        self._reference_key: Optional[tuple] = None

    def reference_hashes(self, reference_root: Path,
                         categories: Iterable[str] = config.MEDIA_CATEGORIES) -> Set[str]:
        """Hashes every file under `reference_root`; files that cannot be read are left out."""
        categories = frozenset(categories)
        key = (Path(reference_root), categories)
        if self._reference_hashes is not None and self._reference_key == key:
            return self._reference_hashes

        check_directory(reference_root)
        files = list(self.scanner.scan(reference_root, categories))
        logging.info(f"Found {len(files)} media files in library")
        logging.info("Calculating hashes for library files (this may take a while)...")

        hashes: Set[str] = set()
        for record in tqdm(files, desc="Hashing library", unit="file", disable=not self.show_progress):
            try:
                hashes.add(self.hasher.compute_hash(record.path))
            except HashIoError as e:
                logging.warning(str(e))

        self._reference_hashes = hashes
        self._reference_key = key
        return hashes

    def find_missing(self,
                     candidate_root: Path,
                     reference_root: Path,
                     categories: Iterable[str] = config.MEDIA_CATEGORIES,
                     skip_dirs: Optional[Set[Path]] = None) -> List[FileRecord]:
        """
        Returns the candidate files missing from the reference tree, in walk order.

        A candidate that cannot be hashed counts as missing. Two missing files
        with identical content are both returned.
        """
        categories = frozenset(categories)
        check_directory(candidate_root)
        known = self.reference_hashes(reference_root, categories)

        candidates = list(self.scanner.scan(candidate_root, categories, skip_dirs))
        logging.info(f"Found {len(candidates)} media files in backup directory")
        logging.info("Comparing backup files with library by content hash...")

        missing: List[FileRecord] = []
        for record in tqdm(candidates, desc="Comparing", unit="file", disable=not self.show_progress):
            try:
                digest = self.hasher.compute_hash(record.path)
            except HashIoError as e:
                # Unverifiable files stay in the review list
                logging.warning(f"{e} (reporting as missing)")
                missing.append(record)
                continue
            if digest not in known:
                missing.append(record)

        return missing
