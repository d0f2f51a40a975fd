"""Read-only access to the latest snapshot image on local storage."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from anyio import Path as AsyncPath

from doorbell_relay.models.config import SnapshotConfig

logger = logging.getLogger(__name__)

REASON_MISSING = "Snapshot file missing"
REASON_UNREADABLE = "Snapshot file unreadable"


@dataclass(frozen=True)
class Snapshot:
    """Snapshot bytes as read at send time."""

    path: Path
    data: bytes


@dataclass(frozen=True)
class SnapshotMissing:
    """No usable snapshot; carries the reason reported in the fallback text."""

    path: Path
    reason: str


SnapshotResult = Snapshot | SnapshotMissing


class SnapshotReader:
    """Reads the well-known snapshot file written by the sensing device.

    The file is only ever read. The device owns its lifecycle and may rewrite
    it at any time, so a read can see the previous image, the new one, or fail.

    Uses anyio for non-blocking filesystem operations so a slow disk does not
    stall the event loop, and bounds each read by ``read_timeout_s``.
    """

    def __init__(self, config: SnapshotConfig) -> None:
        self.path = Path(config.path)
        self._read_timeout_s = config.read_timeout_s

    async def exists(self) -> bool:
        """Return True if a regular file currently exists at the snapshot path."""
        return await AsyncPath(self.path).is_file()

    async def read(self) -> SnapshotResult:
        """Return the snapshot bytes, or the reason no snapshot is available."""
        if not await self.exists():
            return SnapshotMissing(path=self.path, reason=REASON_MISSING)

        try:
            data = await asyncio.wait_for(
                AsyncPath(self.path).read_bytes(), timeout=self._read_timeout_s
            )
        except FileNotFoundError:
            # Removed between the existence check and the read
            return SnapshotMissing(path=self.path, reason=REASON_MISSING)
        except (OSError, asyncio.TimeoutError) as exc:
            logger.warning("Snapshot read failed: path=%s error=%s", self.path, exc)
            return SnapshotMissing(path=self.path, reason=REASON_UNREADABLE)

        if not data:
            return SnapshotMissing(path=self.path, reason=REASON_UNREADABLE)
        return Snapshot(path=self.path, data=data)
