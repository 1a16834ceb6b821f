import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Set

from dotenv import load_dotenv

from . import config
from .core import BackupAuditApp
from .disposition.prompts import ConsolePrompter
from .exceptions import (
    ConfigError,
    InvalidInputError,
    PathNotAccessibleError,
    PathNotFoundError,
)
from .paths import check_directory, check_external_drive


def setup_logging(log_dir: Path, verbose: bool):
    """Sets up logging to both console and a file in the log directory."""
    log_level = logging.DEBUG if verbose else logging.INFO

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / config.LOG_FILE_NAME

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(
        prog="backup-audit",
        description="Check that every backed-up photo and video is in the library, and clean up the rest.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--backup-dir", type=Path, default=None,
                   help=f"Backup directory to audit (default: ${config.ENV_BACKUP_DIR})")
    p.add_argument("--library-dir", type=Path, default=None,
                   help=f"Library root; its '{config.LIBRARY_UPLOAD_SUBDIR}' subtree is the reference (default: ${config.ENV_LIBRARY_DIR})")
    p.add_argument("--skip-dirs-file", type=Path, default=None, help="File containing backup paths to ignore")
    p.add_argument("--no-progress", action="store_true", help="Hide progress bars")

    sub = p.add_subparsers(dest="command", required=True)

    compare = sub.add_parser("compare", help="List backup files that are not in the library")
    compare.add_argument("--report-csv", type=Path, default=None, help="Write the missing files to this CSV")

    sub.add_parser("sync", help="Compare, then review missing files interactively")
    sub.add_parser("check-paths", help="Check the configured directories")

    return p.parse_args(argv)


def load_skip_dirs(skip_file: Optional[Path]) -> Set[Path]:
    if not skip_file or not skip_file.exists():
        return set()

    skips = set()
    with skip_file.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                skips.add(Path(line).expanduser().absolute())
    return skips


def check_paths() -> int:
    """Prints the state of every configured directory. Returns 0 only if all are usable."""
    paths = [
        (config.ENV_EXPORT_DIR, "Photos export directory"),
        (config.ENV_BACKUP_DIR, "Raw photos backup directory"),
        (config.ENV_LIBRARY_DIR, "Library directory"),
    ]
    ok = True
    for var, desc in paths:
        value = os.environ.get(var)
        if not value:
            print(f"{desc}: environment variable {var} not set")
            ok = False
            continue

        path = Path(value).expanduser()
        try:
            check_directory(path, writable=True)
            check_external_drive(path)
        except (PathNotFoundError, PathNotAccessibleError) as e:
            print(f"{desc}: {path} - {e}")
            ok = False
        else:
            print(f"{desc}: {path} - exists, accessible, drive connected")
    return 0 if ok else 3


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)

    setup_logging(config.log_dir(), args.verbose)

    if args.command == "check-paths":
        return check_paths()

    try:
        backup_root = config.backup_dir(args.backup_dir).absolute()
        reference_root = config.reference_dir(args.library_dir).absolute()
    except ConfigError as e:
        logging.error(f"Config error: {e}")
        return 2

    app = BackupAuditApp(
        backup_root,
        reference_root,
        skip_dirs=load_skip_dirs(args.skip_dirs_file),
        show_progress=not args.no_progress,
    )

    trash_root = None
    if args.command == "sync":
        try:
            trash_root = config.trash_root()
        except PathNotAccessibleError as e:
            logging.error(f"Fatal: {e}")
            return 1

    try:
        if args.command == "compare":
            app.compare(report_csv=args.report_csv)
        else:
            app.sync(ConsolePrompter(), trash_root)
    except (PathNotFoundError, PathNotAccessibleError) as e:
        logging.error(str(e))
        return 3
    except InvalidInputError as e:
        logging.error(f"Session aborted: {e}")
        return 1
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
