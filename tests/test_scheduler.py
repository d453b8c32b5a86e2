import asyncio
import dataclasses

import pytest

from daynightmap.models import GeoPoint
from daynightmap.scheduler import LiveMap


def _collect():
    frames = []
    return frames, frames.append


def test_fixed_instant_renders_once(small_config):
    frames, sink = _collect()
    asyncio.run(LiveMap(small_config, sink).run())
    assert len(frames) == 1
    assert frames[0].observer is None


def test_location_arrives_after_first_frame(small_config):
    frames, sink = _collect()

    async def locator():
        await asyncio.sleep(0)
        return GeoPoint(lat=51.5, lng=-0.1)

    live = LiveMap(small_config, sink, locator=locator)
    asyncio.run(live.run())
    assert [f.observer is None for f in frames] == [True, False]
    assert live.observer == GeoPoint(lat=51.5, lng=-0.1)


def test_missing_location_keeps_rendering(small_config):
    frames, sink = _collect()

    async def locator():
        return None

    asyncio.run(LiveMap(small_config, sink, locator=locator).run())
    assert len(frames) == 1


def test_crashing_locator_is_contained(small_config):
    frames, sink = _collect()

    async def locator():
        raise RuntimeError("no network")

    live = LiveMap(small_config, sink, locator=locator)
    asyncio.run(live.run())
    assert len(frames) == 1
    assert live.observer is None


def test_known_observer_skips_lookup(small_config):
    frames, sink = _collect()

    async def locator():
        pytest.fail("lookup should not run")

    asyncio.run(LiveMap(small_config, sink, observer=GeoPoint(0.0, 0.0), locator=locator).run())
    assert len(frames) == 1
    assert frames[0].observer is not None


def test_live_loop_respects_max_frames(small_config):
    config = dataclasses.replace(small_config, fixed_instant=None)
    frames, sink = _collect()
    live = LiveMap(config, sink, interval=0.01)
    asyncio.run(live.run(max_frames=3))
    assert live.frames == 3
    # Each cycle captures its own instant
    assert frames[0].instant <= frames[1].instant <= frames[2].instant


def test_stop_ends_loop(small_config):
    config = dataclasses.replace(small_config, fixed_instant=None)
    live = None
    count = []

    def sink(frame):
        count.append(frame)
        if len(count) == 2:
            live.stop()

    live = LiveMap(config, sink, interval=0.01)
    asyncio.run(live.run())
    assert len(count) == 2
    assert live.stopped


def test_lookup_starts_before_first_frame_is_delivered(small_config):
    events = []

    async def locator():
        events.append("lookup-start")
        await asyncio.sleep(0)
        return GeoPoint(lat=10.0, lng=10.0)

    asyncio.run(LiveMap(small_config, lambda frame: events.append("frame"), locator=locator).run())
    assert events == ["lookup-start", "frame", "frame"]
