from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from ..models import DispositionSummary, FileRecord


class Disposition:
    TRASH = 't'
    KEEP = 'k'

    ALL = (TRASH, KEEP)


@dataclass
class DispositionSession:
    """
    State of one interactive review.

    The queue never shrinks. Handled items are recorded in `processed` and the
    cursor skips over them, so bulk actions on the tail never cause an item to
    be offered twice. `override` holds the "apply to all" action once chosen.
    """
    queue: Tuple[FileRecord, ...]
    cursor: int = 0
    override: Optional[str] = None
    processed: Set[int] = field(default_factory=set)
    quit_requested: bool = False

    @classmethod
    def start(cls, missing: Sequence[FileRecord]) -> "DispositionSession":
        return cls(queue=tuple(missing))

    def __len__(self) -> int:
        return len(self.queue)

    @property
    def done(self) -> bool:
        return self.quit_requested or self.cursor >= len(self.queue)

    @property
    def current(self) -> FileRecord:
        return self.queue[self.cursor]

    def remaining(self) -> List[int]:
        """Indices from the cursor onward that have not been handled yet."""
        return [i for i in range(self.cursor, len(self.queue)) if i not in self.processed]

    def mark_processed(self, index: int) -> None:
        if index < self.cursor:
            raise ValueError(f"index {index} is behind the cursor ({self.cursor})")
        self.processed.add(index)
        self._skip_processed()

    def skip(self) -> None:
        """Moves past the current item without marking it handled."""
        self.cursor += 1
        self._skip_processed()

    def _skip_processed(self) -> None:
        while self.cursor < len(self.queue) and self.cursor in self.processed:
            self.cursor += 1


def summarize(session: DispositionSession) -> DispositionSummary:
    """Counts trashed files by checking which originals are gone from disk."""
    trashed = sum(1 for record in session.queue if not record.path.exists())
    return DispositionSummary(
        total=len(session.queue),
        processed=len(session.processed),
        trashed=trashed,
        kept=len(session.queue) - trashed,
        quit_early=session.quit_requested,
    )
