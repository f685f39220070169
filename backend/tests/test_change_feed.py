import asyncio

import pytest

from portal.services.change_feed import ChangeFeed


def _membership(name):
    return {"name": name, "email": f"{name}@gmail.com", "status": "pending"}


class TestChangeFeed:
    def test_initial_snapshot_then_full_replacement(self, session_factory):
        from portal.services.document_store import DocumentStore

        feed = ChangeFeed()
        store = DocumentStore(session_factory, feed=feed)
        store.add("memberships", _membership("asha"), timestamp_field="submittedAt")

        async def scenario():
            snapshot = lambda: store.query("memberships", order_by="submittedAt")
            async with feed.subscribe("memberships", snapshot) as sub:
                stream = sub.snapshots()
                first = await stream.__anext__()
                await asyncio.to_thread(store.add, "memberships", _membership("ravi"), "submittedAt")
                second = await asyncio.wait_for(stream.__anext__(), timeout=5)
                live = feed.subscriber_count("memberships")
                await stream.aclose()
            return first, second, live

        first, second, live = asyncio.run(scenario())
        assert [m["name"] for m in first] == ["asha"]
        assert [m["name"] for m in second] == ["ravi", "asha"]
        assert live == 1
        assert feed.subscriber_count("memberships") == 0

    def test_unsubscribes_when_view_fails(self):
        feed = ChangeFeed()

        async def scenario():
            async with feed.subscribe("employees", list):
                raise RuntimeError("view torn down")

        with pytest.raises(RuntimeError):
            asyncio.run(scenario())
        assert feed.subscriber_count("employees") == 0

    def test_other_collections_do_not_wake_subscribers(self):
        feed = ChangeFeed()

        async def scenario():
            async with feed.subscribe("employees", list) as sub:
                stream = sub.snapshots()
                await stream.__anext__()
                feed.publish("memberships")
                with pytest.raises(asyncio.TimeoutError):
                    await asyncio.wait_for(stream.__anext__(), timeout=0.2)

        asyncio.run(scenario())
