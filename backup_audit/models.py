from dataclasses import dataclass
from pathlib import Path


class MediaCategory:
    PHOTO = 'photo'
    VIDEO = 'video'
    METADATA = 'metadata'


@dataclass(frozen=True)
class FileRecord:
    """
    A file found during a tree walk, identified by its absolute path.
    """
    path: Path
    category: str           # photo/video/metadata

    @property
    def name(self) -> str:
        return self.path.name


@dataclass
class DispositionSummary:
    """
    Outcome of a review session.

    `trashed` and `kept` come from checking the filesystem at the end of the
    session, `processed` from the items the session marked as handled.
    """
    total: int
    processed: int
    trashed: int
    kept: int
    quit_early: bool = False

    @property
    def unprocessed(self) -> int:
        return self.total - self.processed
