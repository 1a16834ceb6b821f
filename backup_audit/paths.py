"""
Directory sanity checks run before an audit touches a tree.
"""
import os
import logging
from pathlib import Path

from .exceptions import PathNotFoundError, PathNotAccessibleError

EXTERNAL_MOUNT_PREFIX = "/Volumes"


def check_directory(path: Path, writable: bool = False) -> Path:
    """Raises PathNotFoundError / PathNotAccessibleError unless `path` is a usable directory."""
    if not path.exists():
        raise PathNotFoundError(f"Directory not found: {path}")
    if not path.is_dir():
        raise PathNotAccessibleError(f"{path} is not a directory")
    if not os.access(path, os.R_OK | os.X_OK):
        raise PathNotAccessibleError(f"{path} is not readable")
    if writable and not os.access(path, os.W_OK):
        raise PathNotAccessibleError(f"{path} is not writable")
    return path


def check_external_drive(path: Path) -> None:
    """
    Raises PathNotAccessibleError when `path` lives on an unmounted external drive,
    either directly under /Volumes or through a symlink pointing there.
    """
    if path.is_symlink():
        target = Path(os.readlink(path))
        logging.debug(f"Path {path} is a symlink pointing to {target}")
        if str(target).startswith(EXTERNAL_MOUNT_PREFIX) and not target.exists():
            raise PathNotAccessibleError(
                f"External drive for {path} is not connected (symlink target: {target})"
            )
    elif str(path).startswith(EXTERNAL_MOUNT_PREFIX) and not path.exists():
        raise PathNotAccessibleError(f"External drive for {path} is not connected")
