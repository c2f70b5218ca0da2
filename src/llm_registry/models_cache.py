"""JSON file cache holding the last good raw model batch."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import aiofiles
import aiofiles.os

from llm_registry.errors import CacheError
from llm_registry.logging import get_logger
from llm_registry.models.snapshot import RegistrySnapshot

logger = get_logger(__name__)


class ModelsCache:
    """JSON file cache for raw OpenRouter records.

    Keeps the raw batch rather than the built registry, so a registry can
    be rebuilt from it with the current normalization rules. Uses atomic
    writes (write to temp, rename).
    """

    def __init__(self, cache_file: Path) -> None:
        """Initialize the cache.

        Args:
            cache_file: Path to the snapshot JSON file.
        """
        self.cache_file = Path(cache_file).expanduser()

    async def ensure_dir(self) -> None:
        """Ensure the cache directory exists."""
        await aiofiles.os.makedirs(self.cache_file.parent, exist_ok=True)

    async def load(self) -> RegistrySnapshot | None:
        """Load the cached snapshot.

        Returns:
            RegistrySnapshot if the cache exists and is valid, None otherwise.
        """
        if not await aiofiles.os.path.exists(self.cache_file):
            logger.debug("Snapshot file does not exist", path=str(self.cache_file))
            return None

        try:
            async with aiofiles.open(self.cache_file, encoding="utf-8") as f:
                content = await f.read()
            snapshot = RegistrySnapshot.model_validate(json.loads(content))
        except (OSError, ValueError) as e:
            logger.warning("Failed to load snapshot", path=str(self.cache_file), error=str(e))
            return None

        logger.info(
            "Loaded snapshot",
            model_count=len(snapshot.models),
            fetched_at=snapshot.fetched_at.isoformat(),
        )
        return snapshot

    async def save(self, snapshot: RegistrySnapshot) -> None:
        """Save a snapshot, replacing the previous one atomically.

        Args:
            snapshot: The snapshot to save.

        Raises:
            CacheError: If the file cannot be written.
        """
        temp_path = self.cache_file.with_suffix(".json.tmp")
        content = json.dumps(
            snapshot.model_dump(mode="json", exclude_none=True),
            indent=2,
        )

        try:
            await self.ensure_dir()
            async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                await f.write(content)
            await aiofiles.os.replace(temp_path, self.cache_file)
        except OSError as e:
            if await aiofiles.os.path.exists(temp_path):
                await aiofiles.os.remove(temp_path)
            raise CacheError(f"Failed to save snapshot: {e}") from e

        logger.info(
            "Saved snapshot",
            path=str(self.cache_file),
            model_count=len(snapshot.models),
        )

    async def get_age_seconds(self) -> float | None:
        """Get the age of the cache file in seconds, or None if absent."""
        try:
            stat = await aiofiles.os.stat(self.cache_file)
        except OSError:
            return None
        return datetime.now(UTC).timestamp() - stat.st_mtime

    async def exists(self) -> bool:
        """Check if the cache file exists."""
        return await aiofiles.os.path.exists(self.cache_file)

    async def clear(self) -> bool:
        """Delete the cache file.

        Returns:
            True if a file was removed.
        """
        try:
            await aiofiles.os.remove(self.cache_file)
        except FileNotFoundError:
            return False
        logger.info("Cleared snapshot", path=str(self.cache_file))
        return True
