import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..exceptions import CommandSpawnError, RelocationError
from ..metadata.extract import MetadataExtractor
from ..models import DispositionSummary, FileRecord
from .external import open_externally
from .filters import choose_filter
from .prompts import Prompter, first_char, is_no, is_yes
from .relocation import TrashRelocator
from .session import Disposition, DispositionSession, summarize

LEGEND = [
    "[t] Move to trash (safer than permanent deletion)",
    "[k] Keep in backup (skip this file)",
    "[v] View file info and optionally open file",
    "[d] Open directory containing file",
    "[s] Select multiple files for batch processing",
    "[f] Apply filter to remaining files",
    "[a] Process all remaining files with the same action",
    "[q] Quit sync process",
]


class DispositionWorkflow:
    """
    Interactive review of files missing from the library.

    Each prompt reads one command character and dispatches it through
    `self.commands`. `s` and `f` run their own sub-loops over the unvisited
    tail of the queue and return to the main prompt when finished.
    """

    def __init__(self,
                 prompter: Prompter,
                 relocator: TrashRelocator,
                 extractor: Optional[MetadataExtractor] = None,
                 opener: Callable[[Path], None] = open_externally):
        self.prompter = prompter
        self.relocator = relocator
        self.extractor = extractor or MetadataExtractor()
        self.opener = opener
        self.commands = {
            't': self._trash_current,
            'k': self._keep_current,
            'v': self._view_current,
            'd': self._open_current_dir,
            's': self._batch_select,
            'f': self._filter_tail,
            'a': self._set_override,
            'q': self._quit,
        }

    def run(self, session: DispositionSession) -> DispositionSummary:
        logging.info("Beginning interactive sync process...")
        logging.info("-------------------------------------------------")
        logging.info("Options for each file:")
        for line in LEGEND:
            logging.info(line)
        logging.info("-------------------------------------------------")

        while not session.done:
            if session.override is not None:
                self._apply_override(session)
                continue

            record = session.current
            logging.info(f"File {session.cursor + 1}/{len(session)}: {record.path}")
            command = first_char(self.prompter.ask("Action [t/k/v/d/s/f/a/q]: "))
            handler = self.commands.get(command)
            if handler is None:
                logging.warning(f"Invalid action '{command or ''}'. Please choose [t/k/v/d/s/f/a/q].")
                continue
            handler(session)

        summary = summarize(session)
        self._log_summary(summary)
        return summary

    # --- Reviewing commands ---

    def _trash_current(self, session: DispositionSession):
        index = session.cursor
        error = self._trash(session.queue[index])
        if error is None:
            session.mark_processed(index)
        elif error.stage == RelocationError.COPY:
            if is_no(self.prompter.ask("Try again? [Y/n]: ")):
                session.skip()
        else:
            session.skip()

    def _keep_current(self, session: DispositionSession):
        logging.info(f"Keeping in backup: {session.current.path}")
        session.mark_processed(session.cursor)

    def _view_current(self, session: DispositionSession):
        self._show_details(session.current, ask_to_open=True)

    def _open_current_dir(self, session: DispositionSession):
        self._open_parent(session.current)

    def _set_override(self, session: DispositionSession):
        action = first_char(self.prompter.ask("Apply which action to all remaining files? [t/k]: "))
        if action in Disposition.ALL:
            session.override = action
            logging.info(f"Applying '{action}' to all remaining files.")
        else:
            logging.warning(f"Invalid action '{action or ''}'. Please choose again.")

    def _quit(self, session: DispositionSession):
        session.quit_requested = True
        logging.info(f"Sync process cancelled. Processed {len(session.processed)} of {len(session)} files.")

    def _apply_override(self, session: DispositionSession):
        index = session.cursor
        record = session.queue[index]
        if session.override == Disposition.TRASH:
            if self._trash(record) is None:
                session.mark_processed(index)
            else:
                session.skip()
        else:
            logging.info(f"Keeping in backup: {record.path}")
            session.mark_processed(index)

    # --- BatchSelecting ---

    def _batch_select(self, session: DispositionSession):
        logging.info("Starting batch selection mode. You'll be shown each file to select or skip.")
        pending = session.remaining()
        selected: List[int] = []
        pos = 0

        while pos < len(pending):
            index = pending[pos]
            record = session.queue[index]
            logging.info(f"File {index + 1}/{len(session)}: {record.path}")
            answer = first_char(self.prompter.ask("Select this file? [y/n/v/d/q]: "))

            if answer == 'y':
                logging.info("File selected")
                selected.append(index)
                pos += 1
            elif answer == 'n':
                logging.info("File skipped")
                pos += 1
            elif answer == 'v':
                self._show_details(record, ask_to_open=True)
            elif answer == 'd':
                self._open_parent(record)
            elif answer == 'q':
                logging.info("Exiting batch selection mode")
                break
            else:
                logging.warning(f"Invalid action '{answer or ''}'. Please choose [y/n/v/d/q].")

        if not selected:
            logging.info("No files were selected. Continuing with regular processing.")
            return

        logging.info(f"Selected {len(selected)} files. Choose action to apply to selected files:")
        logging.info("[t] Move all selected files to trash")
        logging.info("[k] Keep all selected files in backup")
        action = first_char(self.prompter.ask("Action for selected files [t/k]: "))
        if action in Disposition.ALL:
            self._apply_bulk(session, selected, action)
        else:
            logging.warning(f"Invalid action '{action or ''}'. No action taken on selected files.")

    # --- Filtering ---

    def _filter_tail(self, session: DispositionSession):
        predicate = choose_filter(self.prompter)
        if predicate is None:
            return

        matches = [i for i in session.remaining() if predicate(session.queue[i])]
        if not matches:
            logging.info("No files matched the filter criteria")
            return

        logging.info(f"Found {len(matches)} files matching filter criteria")
        action = first_char(self.prompter.ask("Apply action to all filtered files? [t/k/n]: "))
        if action in Disposition.ALL:
            self._apply_bulk(session, matches, action)
        else:
            logging.info("No bulk action taken. Continuing with standard processing.")

    # --- Shared helpers ---

    def _apply_bulk(self, session: DispositionSession, indices: Iterable[int], action: str):
        indices = sorted(indices, reverse=True)
        if action == Disposition.TRASH:
            logging.info(f"Moving {len(indices)} files to trash")
            for index in indices:
                if self._trash(session.queue[index]) is None:
                    session.mark_processed(index)
        else:
            logging.info(f"Keeping {len(indices)} files in backup")
            for index in indices:
                session.mark_processed(index)

    def _trash(self, record: FileRecord) -> Optional[RelocationError]:
        logging.info(f"Moving to trash: {record.path}")
        try:
            destination = self.relocator.relocate(record.path)
        except RelocationError as e:
            if e.stage == RelocationError.DELETE:
                logging.warning(f"File was copied to trash ({e.destination}) but could not be deleted from backup: {e}")
                logging.warning("Manual deletion may be required")
            else:
                logging.error(f"Failed to copy file to trash: {e}")
            return e
        logging.info(f"File successfully moved to trash: {destination}")
        return None

    def _show_details(self, record: FileRecord, ask_to_open: bool):
        try:
            details = self.extractor.inspect(record.path)
        except OSError as e:
            logging.warning(f"Cannot read file info for {record.path}: {e}")
            return
        for line in details.lines():
            logging.info(line)

        if ask_to_open and is_yes(self.prompter.ask("View this file? [y/N]: ")):
            logging.info("Opening file with default application...")
            if self._launch(record.path):
                self.prompter.pause()

    def _open_parent(self, record: FileRecord):
        logging.info("Opening directory containing file...")
        if self._launch(record.path.parent):
            self.prompter.pause()

    def _launch(self, path: Path) -> bool:
        try:
            self.opener(path)
        except CommandSpawnError as e:
            logging.warning(str(e))
            return False
        return True

    def _log_summary(self, summary: DispositionSummary):
        title = "Sync stopped early. Summary:" if summary.quit_early else "Sync completed. Summary:"
        logging.info(title)
        logging.info(f"  - {summary.trashed} files moved to trash")
        logging.info(f"  - {summary.kept} files kept in backup")
        logging.info(f"  - {summary.processed} files processed, {summary.unprocessed} not processed")
