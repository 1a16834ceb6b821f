from .session import Disposition, DispositionSession, summarize
from .relocation import TrashRelocator
from .workflow import DispositionWorkflow

__all__ = [
    'Disposition',
    'DispositionSession',
    'DispositionWorkflow',
    'TrashRelocator',
    'summarize',
]
