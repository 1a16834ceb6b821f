import os
import sys
import logging
import subprocess
from pathlib import Path

from ..exceptions import CommandSpawnError


def open_externally(path: Path) -> None:
    """
    Opens a file or directory with the platform's default handler.

    The viewer is launched and left running; this never waits for it to exit.
    """
    try:
        if sys.platform == 'win32':
            os.startfile(str(path))
        elif sys.platform == 'darwin':
            subprocess.Popen(['open', str(path)],
                             stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        else:
            subprocess.Popen(['xdg-open', str(path)],
                             stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL,
                             start_new_session=True)
    except OSError as e:
        raise CommandSpawnError(f"Failed to open {path}: {e}") from e
    logging.debug(f"Launched viewer for {path}")
