import hashlib
from pathlib import Path

from .. import config
from ..exceptions import HashIoError


class FileHasher:
    """Streams a file through SHA-256 in fixed-size chunks."""

    def __init__(self, chunk_size: int = config.HASH_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def compute_hash(self, path: Path) -> str:
        """
        Returns the lowercase hex SHA-256 digest of the file's full contents.

        Memory use does not depend on file size. Raises HashIoError when the
        file cannot be opened or read.
        """
        h = hashlib.sha256()
        try:
            with open(path, 'rb') as f:
                while chunk := f.read(self.chunk_size):
                    h.update(chunk)
        except OSError as e:
            raise HashIoError(Path(path), str(e)) from e
        return h.hexdigest()
