# streaming/consumers.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from common.settings import Settings
from etl.indexers import Indexer, transform_batch
from etl.transform import TransformContext
from streaming.broker import MemoryBatchBroker

logger = logging.getLogger(__name__)

Sink = Callable[[List[Dict[str, Any]]], None]


def run_indexer_batch(indexer: Indexer, batch: Dict[str, Any], settings: Settings) -> List[Dict[str, Any]]:
    """Transform one batch with the deployment and codec options from settings."""
    return transform_batch(
        indexer,
        batch,
        TransformContext.from_settings(settings),
        contract=settings.contract(indexer.contract_role),
        skip_failed_events=settings.skip_failed_events,
    )


async def consume_batches(
    broker: MemoryBatchBroker,
    indexer: Indexer,
    settings: Settings,
    sink: Sink,
    *,
    max_batches: Optional[int] = None,
) -> int:
    """
    Loop over batches from the indexer cursor onwards.
    Each batch is transformed, handed to the sink, then acknowledged. A batch
    that fails is not acknowledged and the error propagates.
    """
    processed = 0
    async for msg in broker.subscribe(indexer.name):
        outputs = run_indexer_batch(indexer, msg.batch, settings)
        sink(outputs)
        await broker.commit(indexer.name, msg.offset)
        logger.debug("%s: block %s -> %d outputs", indexer.name, msg.block_number, len(outputs))
        processed += 1
        if max_batches is not None and processed >= max_batches:
            break
    return processed
