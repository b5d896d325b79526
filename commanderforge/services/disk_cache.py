"""
On-disk response cache.

Entries are text files keyed by the SHA-1 of the cache key, sharded into
two directory levels so no single folder grows huge:

    <root>/ab/cd/abcd...ef.json
"""

import hashlib
import logging
import os
import tempfile
import time
from datetime import timedelta
from pathlib import Path

logger = logging.getLogger(__name__)


class DiskCache:
    """Cache of text responses with a max-age check on read."""

    def __init__(self, root: Path | str) -> None:
        """Initialize cache.

        Args:
            root: Directory to store cache files. Created if missing.
        """
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        """Get cache file path for a key."""
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
        return self.root / digest[:2] / digest[2:4] / f"{digest}.json"

    def get(self, key: str, max_age: timedelta) -> str | None:
        """
        Read a cached entry.

        Returns:
            The cached text, or None if missing or older than max_age
        """
        path = self.path_for(key)
        if not path.exists():
            return None

        age_seconds = time.time() - path.stat().st_mtime
        if age_seconds > max_age.total_seconds():
            logger.debug("Cache entry for %s is stale (%.0fs old)", key, age_seconds)
            return None

        with open(path, encoding="utf-8") as f:
            return f.read()

    def put(self, key: str, value: str) -> None:
        """
        Write an entry, replacing any existing one.

        The text goes to a temp file in the same shard first and is then
        renamed over the entry, so readers never see a partial write.
        """
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
