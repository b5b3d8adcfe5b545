"""
Persistent rule catalog snapshot.

A single JSON file holds the most recent successful catalog fetch. It is
overwritten wholesale on every save.
"""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from rulestudio.core.config import config
from rulestudio.core.errors import CacheReadError
from rulestudio.rules.models import CatalogSnapshot, Rule

logger = logging.getLogger(__name__)


class RuleCacheStore:
    """Reads and writes the single named catalog snapshot."""

    def __init__(self, cache_dir: str | Path | None = None, file_name: str | None = None):
        directory = cache_dir if cache_dir is not None else config.cache.cache_dir
        self.cache_dir = Path(directory).expanduser()
        self.path = self.cache_dir / (file_name or config.cache.rules_file)

    def save(self, rules: list[Rule], tool_version: str | None = None) -> CatalogSnapshot:
        """Replace the snapshot with ``rules``. The write is atomic."""
        snapshot = CatalogSnapshot(rules=rules, tool_version=tool_version)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=".rules-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(snapshot.model_dump_json(indent=2))
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Cached {len(rules)} rules at {self.path}")
        return snapshot

    def load_snapshot(self) -> CatalogSnapshot:
        """
        Read the current snapshot.

        Raises:
            CacheReadError: If no snapshot exists or it cannot be decoded.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CacheReadError(str(self.path), "no snapshot") from e
        except OSError as e:
            raise CacheReadError(str(self.path), str(e)) from e

        try:
            return CatalogSnapshot.model_validate_json(raw)
        except ValidationError as e:
            raise CacheReadError(str(self.path), f"corrupt snapshot ({e.error_count()} errors)") from e

    def load(self) -> list[Rule]:
        return self.load_snapshot().rules

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
