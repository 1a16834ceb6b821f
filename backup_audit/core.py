import logging
from pathlib import Path
from typing import List, Optional, Set

from . import config
from .disposition import DispositionSession, DispositionWorkflow, TrashRelocator
from .disposition.filters import choose_filter
from .disposition.prompts import Prompter, is_yes
from .models import DispositionSummary, FileRecord
from .reconcile import Reconciler
from .reporting import ReportGenerator


class BackupAuditApp:
    """
    Ties the audit steps together for the CLI.

    compare: hash the library, then report backup files it does not contain.
    sync:    compare, then review the missing files interactively.
    """

    def __init__(self,
                 backup_root: Path,
                 reference_root: Path,
                 skip_dirs: Optional[Set[Path]] = None,
                 show_progress: bool = True):
        self.backup_root = backup_root
        self.reference_root = reference_root
        self.skip_dirs = skip_dirs or set()
        self.reconciler = Reconciler(show_progress=show_progress)
        self.reporter = ReportGenerator()

    def compare(self, report_csv: Optional[Path] = None) -> List[FileRecord]:
        logging.info(f"Backup:  {self.backup_root}")
        logging.info(f"Library: {self.reference_root}")

        missing = self.reconciler.find_missing(
            self.backup_root,
            self.reference_root,
            config.MEDIA_CATEGORIES,
            skip_dirs=self.skip_dirs,
        )
        self.reporter.log_missing(missing)
        if report_csv:
            self.reporter.write_csv(missing, report_csv)
        return missing

    def sync(self,
             prompter: Prompter,
             trash_root: Path,
             workflow: Optional[DispositionWorkflow] = None) -> Optional[DispositionSummary]:
        missing = self.compare()
        if not missing:
            logging.info("No discrepancies found. All media files from backup are present in library.")
            return None

        logging.info(f"Found {len(missing)} media files in backup that are not in library.")
        missing = self._prefilter(prompter, missing)
        if not missing:
            logging.info("No files to process after filtering. Exiting.")
            return None

        logging.info(f"Trash directory: {trash_root}")
        workflow = workflow or DispositionWorkflow(prompter, TrashRelocator(trash_root))
        session = DispositionSession.start(missing)
        return workflow.run(session)

    def _prefilter(self, prompter: Prompter, missing: List[FileRecord]) -> List[FileRecord]:
        """Optionally narrows the review list before the session starts."""
        if not is_yes(prompter.ask("Do you want to filter files by media type or pattern? [y/N]: ")):
            return missing

        predicate = choose_filter(prompter)
        if predicate is None:
            logging.info("No filter applied")
            return missing

        narrowed = [r for r in missing if predicate(r)]
        logging.info(f"Found {len(narrowed)} files to process")
        return narrowed
