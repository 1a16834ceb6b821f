"""
Configuration constants for the backup auditor.
"""
import os
import sys
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError, PathNotAccessibleError
from .models import MediaCategory

# --- File Type Definitions ---
PHOTO_EXTS = {'.jpg', '.jpeg', '.png', '.heic', '.dng', '.raw', '.arw', '.cr2', '.nef'}
VIDEO_EXTS = {'.mp4', '.mov', '.avi', '.m4v', '.3gp', '.mkv', '.webm', '.flv', '.wmv', '.mts', '.m2ts'}
METADATA_EXTS = {'.xmp'}

# Extension to Category Mapping
EXT_TO_CATEGORY = {}
for ext in PHOTO_EXTS: EXT_TO_CATEGORY[ext] = MediaCategory.PHOTO
for ext in VIDEO_EXTS: EXT_TO_CATEGORY[ext] = MediaCategory.VIDEO
for ext in METADATA_EXTS: EXT_TO_CATEGORY[ext] = MediaCategory.METADATA

ALL_CATEGORIES = frozenset({MediaCategory.PHOTO, MediaCategory.VIDEO, MediaCategory.METADATA})
# Sidecars are never uploaded on their own, so only media is audited
MEDIA_CATEGORIES = frozenset({MediaCategory.PHOTO, MediaCategory.VIDEO})

# --- Hashing ---
HASH_CHUNK_SIZE = 1024 * 1024  # 1 MiB

# --- Environment ---
ENV_EXPORT_DIR = "APPLE_PHOTOS_EXPORT_DIR"
ENV_BACKUP_DIR = "RAW_PHOTOS_BACKUP_DIR"
ENV_LIBRARY_DIR = "IMMICH_LIB"
ENV_LOG_DIR = "BACKUP_AUDIT_LOG_DIR"

# The library keeps ingested originals under this subtree
LIBRARY_UPLOAD_SUBDIR = "upload"

DEFAULT_LOG_DIR = Path.home() / ".cache" / "backup-audit"
LOG_FILE_NAME = "backup_audit.log"

# Number of missing paths echoed by the compare command
MISSING_PREVIEW_LIMIT = 10

# Format of the timestamp used in trash collision suffixes
TRASH_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def env_path(var: str, override: Optional[Path] = None) -> Path:
    """Returns the override or the directory named by `var`, raising ConfigError if neither is set."""
    if override is not None:
        return Path(override).expanduser()
    value = os.environ.get(var)
    if not value:
        raise ConfigError(f"Environment variable not found: {var}")
    return Path(value).expanduser()


def backup_dir(override: Optional[Path] = None) -> Path:
    return env_path(ENV_BACKUP_DIR, override)


def reference_dir(library_override: Optional[Path] = None) -> Path:
    """The library's ingested-asset subtree that backups are checked against."""
    return env_path(ENV_LIBRARY_DIR, library_override) / LIBRARY_UPLOAD_SUBDIR


def log_dir() -> Path:
    value = os.environ.get(ENV_LOG_DIR)
    return Path(value).expanduser() if value else DEFAULT_LOG_DIR


def trash_root() -> Path:
    """
    Resolves the OS trash directory used for soft deletion.

    macOS keeps it at ~/.Trash; elsewhere the freedesktop.org location is used.
    The directory is created when absent.
    """
    home = Path.home()
    if sys.platform == 'darwin':
        root = home / ".Trash"
    else:
        data_home = os.environ.get("XDG_DATA_HOME")
        base = Path(data_home) if data_home else home / ".local" / "share"
        root = base / "Trash" / "files"

    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PathNotAccessibleError(f"Could not prepare trash directory {root}: {e}") from e
    return root
