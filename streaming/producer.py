# streaming/producer.py
import asyncio
from typing import Any, Dict, Iterable

from streaming.broker import MemoryBatchBroker


async def produce_batches(broker: MemoryBatchBroker, batches: Iterable[Dict[str, Any]]) -> int:
    """Publish each batch into the in-memory broker, return how many were published."""
    n = 0
    for batch in batches:
        await broker.publish(batch)
        n += 1
        await asyncio.sleep(0)  # yield control
    return n
