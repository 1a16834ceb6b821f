import csv
import logging
from pathlib import Path
from typing import Sequence

from . import config
from .models import FileRecord


class ReportGenerator:
    """Writes and logs the list of backup files missing from the library."""

    HEADERS = ["Source Path", "Category", "Size Bytes", "Notes"]

    def log_missing(self, missing: Sequence[FileRecord], limit: int = config.MISSING_PREVIEW_LIMIT):
        if not missing:
            logging.info("All media files from backup are present in library (based on content hash)")
            return

        logging.warning(f"{len(missing)} media files from backup are not in library:")
        for record in missing[:limit]:
            logging.warning(f"  - {record.path}")
        if len(missing) > limit:
            logging.warning(f"  ... and {len(missing) - limit} more")

    def write_csv(self, missing: Sequence[FileRecord], output_csv: Path):
        output_csv.parent.mkdir(parents=True, exist_ok=True)
        with open(output_csv, "w", newline="", encoding="utf-8", errors="surrogateescape") as f:
            writer = csv.writer(f)
            writer.writerow(self.HEADERS)
            for record in missing:
                writer.writerow(self._row(record))
        logging.info(f"Report written: {output_csv} ({len(missing)} rows)")

    def _row(self, record: FileRecord) -> list:
        try:
            size = record.path.stat().st_size
            note = ""
        except OSError as e:
            size = ""
            note = f"Stat failed: {e}"
        return [str(record.path), record.category, size, note]
