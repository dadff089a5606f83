"""
JSON Lines channel store used by the CLI.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from channelsieve.services.pipeline.interfaces import ChannelRecord

logger = logging.getLogger(__name__)


class JsonlChannelStore:
    """
    Append channel records to a JSON Lines file.

    Each saved record becomes one line of pydantic JSON. Records already
    saved through this instance are not written again; the file is
    append-only, so replacing earlier runs' records is left to readers
    (the last line for an ID wins).

    Parameters
    ----------
    path : Path
        Output file. Parent directories are created on first write.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._saved_ids: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def saved_count(self) -> int:
        """Number of distinct records written by this instance."""
        return len(self._saved_ids)

    def _append(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")

    async def save(self, record: ChannelRecord) -> None:
        """Append ``record`` unless its channel ID was already written."""
        async with self._lock:
            if record.channel_id in self._saved_ids:
                logger.debug("Channel %s already written, skipping", record.channel_id)
                return
            await asyncio.to_thread(self._append, record.model_dump_json())
            self._saved_ids.add(record.channel_id)
        logger.debug("Saved channel %s to %s", record.channel_id, self.path)


def read_channel_records(path: Path) -> list[ChannelRecord]:
    """
    Read records back from a JSON Lines file, last line per ID winning.

    Blank lines are ignored.
    """
    records: dict[str, ChannelRecord] = {}
    with path.open(encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            record = ChannelRecord.model_validate_json(line)
            records[record.channel_id] = record
    return list(records.values())
