import hashlib
from pathlib import Path

from .. import config
from ..exceptions import FileHashError


class FileHasher:
    def __init__(self, chunk_size: int = config.HASH_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def md5(self, path: Path) -> str:
        """
        Streams the whole file through MD5.
        Raises FileHashError if the file vanished or cannot be read.
        """
        h = hashlib.md5()
        try:
            with open(path, 'rb') as f:
                while chunk := f.read(self.chunk_size):
                    h.update(chunk)
        except OSError as e:
            raise FileHashError(f"Cannot hash {path}: {e}") from e
        return h.hexdigest()
