import asyncio
import pytest

from streaming.broker import MemoryBatchBroker


def _batch(n: int) -> dict:
    return {"header": {"blockNumber": hex(n), "blockHash": f"0xB{n}"}, "events": []}


@pytest.mark.asyncio
async def test_publish_and_subscribe_in_order():
    b = MemoryBatchBroker()
    for n in (100, 101, 102):
        await b.publish(_batch(n))

    got = []

    async def reader():
        async for m in b.subscribe("spot"):
            got.append((m.offset, m.block_number))
            if len(got) == 3:
                await b.commit("spot", m.offset)
                break

    await asyncio.wait_for(reader(), timeout=1.0)
    assert got == [(0, 100), (1, 101), (2, 102)]
    assert await b.get_cursor("spot") == 102


@pytest.mark.asyncio
async def test_resume_after_committed_cursor():
    b = MemoryBatchBroker()
    for n in range(5):
        await b.publish(_batch(n))
    await b.commit("dispatch", 2)

    got = []

    async def reader():
        async for m in b.subscribe("dispatch"):
            got.append(m.block_number)
            if len(got) == 2:
                break

    await asyncio.wait_for(reader(), timeout=1.0)
    assert got == [3, 4]


@pytest.mark.asyncio
async def test_cursors_are_per_indexer_and_only_move_forward():
    b = MemoryBatchBroker()
    await b.publish(_batch(7))
    await b.publish(_batch(8))
    await b.commit("spot", 1)
    await b.commit("spot", 0)
    assert await b.get_offset("spot") == 1
    assert await b.get_cursor("vrf-requests") is None
