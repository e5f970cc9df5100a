# streaming/broker.py

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional

from ingestion.parser import parse_header


@dataclass(frozen=True)
class BatchMessage:
    offset: int
    block_number: int
    batch: Dict[str, Any]
    produced_at: float


class MemoryBatchBroker:
    """
    In memory stand in for the block streaming runtime.

    Batches are kept in publish order. Each indexer has its own cursor, the
    offset of the last batch it acknowledged; subscribing resumes right after
    it, so an unacknowledged batch is delivered again.
    """

    def __init__(self) -> None:
        self._batches: List[BatchMessage] = []
        self._cursors: Dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def publish(self, batch: Dict[str, Any]) -> int:
        header = batch.get("header")
        async with self._lock:
            offset = len(self._batches)
            self._batches.append(
                BatchMessage(
                    offset=offset,
                    block_number=parse_header(header).block_number if header else offset,
                    batch=json.loads(json.dumps(batch)),  # json safe copy
                    produced_at=time.time(),
                )
            )
            return offset

    async def subscribe(self, indexer: str) -> AsyncIterator[BatchMessage]:
        next_offset = await self.get_offset(indexer) + 1
        while True:
            async with self._lock:
                msg = self._batches[next_offset] if next_offset < len(self._batches) else None

            if msg is not None:
                next_offset += 1
                # yield outside the lock so the consumer can commit
                yield msg
                continue

            await asyncio.sleep(0.01)

    async def commit(self, indexer: str, offset: int) -> None:
        async with self._lock:
            if offset > self._cursors.get(indexer, -1):
                self._cursors[indexer] = offset

    async def get_offset(self, indexer: str) -> int:
        async with self._lock:
            return self._cursors.get(indexer, -1)

    async def get_cursor(self, indexer: str) -> Optional[int]:
        """Block number of the last acknowledged batch, None before the first."""
        offset = await self.get_offset(indexer)
        if offset < 0:
            return None
        return self._batches[offset].block_number
