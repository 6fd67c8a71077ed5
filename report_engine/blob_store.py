"""Transient references - local, non-persistable handles for in-app PDF preview."""
import logging
import os
import shutil
import tempfile
import uuid
from typing import Optional

logger = logging.getLogger(__name__)

BLOB_URL_PREFIX = "blob:"


class BlobStore:
    """
    Owns temp files backing transient references of the form ``blob:<token>``.

    A reference lives until ``revoke`` is called by its owning record (on delete
    or replace) or until ``close`` drops the whole spool directory. References
    never survive a restart.
    """

    def __init__(self, spool_dir: Optional[str] = None):
        self._owns_dir = spool_dir is None
        self.spool_dir = spool_dir or tempfile.mkdtemp(prefix="market_blobs_")
        os.makedirs(self.spool_dir, exist_ok=True)
        self._paths: dict[str, str] = {}

    def create(self, data: bytes, suffix: str = "") -> str:
        token = uuid.uuid4().hex
        path = os.path.join(self.spool_dir, token + suffix)
        with open(path, "wb") as f:
            f.write(data)
        url = BLOB_URL_PREFIX + token
        self._paths[url] = path
        return url

    def resolve(self, url: Optional[str]) -> Optional[str]:
        """Filesystem path behind a live reference, or None once revoked/unknown."""
        if not url:
            return None
        path = self._paths.get(url)
        if path and os.path.isfile(path):
            return path
        return None

    def revoke(self, url: Optional[str]) -> bool:
        """Release a reference. Unknown or already-released references are a no-op."""
        if not url:
            return False
        path = self._paths.pop(url, None)
        if path is None:
            return False
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        return True

    def is_live(self, url: Optional[str]) -> bool:
        return bool(url) and url in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def close(self) -> None:
        for url in list(self._paths):
            self.revoke(url)
        if self._owns_dir:
            shutil.rmtree(self.spool_dir, ignore_errors=True)
        logger.info("Blob store closed (%s)", self.spool_dir)
