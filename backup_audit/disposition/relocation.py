import os
import shutil
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from .. import config
from ..exceptions import RelocationError


def now_stamp() -> str:
    return datetime.now().strftime(config.TRASH_TIMESTAMP_FORMAT)


class TrashRelocator:
    """
    Moves files into the trash directory without ever overwriting an entry.

    A move is copy, then verify, then delete. The original is only removed
    once a complete copy exists, so the worst failure leaves the file in both
    places.
    """

    def __init__(self,
                 trash_root: Path,
                 clock: Callable[[], str] = now_stamp,
                 copy: Callable[[Path, Path], object] = shutil.copy2,
                 delete: Callable[[Path], None] = os.remove):
        self.trash_root = trash_root
        self.clock = clock
        self.copy = copy
        self.delete = delete

    def unique_destination(self, name: str) -> Path:
        """trash_root/name, or name-<timestamp>-<n> for the first n that is free."""
        destination = self.trash_root / name
        counter = 1
        while os.path.lexists(destination):
            destination = self.trash_root / f"{name}-{self.clock()}-{counter}"
            counter += 1
        return destination

    def relocate(self, source: Path) -> Path:
        """Returns the trash path on success; raises RelocationError naming the failed stage."""
        destination = self.unique_destination(source.name)

        try:
            self.copy(source, destination)
            self._verify(source, destination)
        except OSError as e:
            self._discard_partial(destination)
            raise RelocationError(RelocationError.COPY, source, None, str(e)) from e

        try:
            self.delete(source)
        except OSError as e:
            raise RelocationError(RelocationError.DELETE, source, destination, str(e)) from e

        return destination

    def _verify(self, source: Path, destination: Path) -> None:
        if not destination.is_file():
            raise OSError(f"copy not found at {destination}")
        expected = source.stat().st_size
        actual = destination.stat().st_size
        if actual != expected:
            raise OSError(f"copy is {actual} bytes, expected {expected}")

    def _discard_partial(self, destination: Path) -> None:
        # The destination name was free before the copy, so anything there is ours
        if not os.path.lexists(destination):
            return
        try:
            destination.unlink()
        except OSError as e:
            logging.warning(f"Could not remove incomplete trash copy {destination}: {e}")
