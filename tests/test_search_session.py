import asyncio
import unittest

from reeltrack.search import DebouncedSearch


class TestDebouncedSearch(unittest.IsolatedAsyncioTestCase):
    async def test_only_last_query_is_searched(self):
        calls = []

        async def search(query):
            calls.append(query)
            return [query.upper()]

        session = DebouncedSearch(search, delay=0.05)
        for query in ("i", "in", "inc", "incep"):
            session.submit(query)
        await session.wait()

        self.assertEqual(calls, ["incep"])
        self.assertEqual(session.results, ["INCEP"])

    async def test_stale_in_flight_result_is_discarded(self):
        release_first = asyncio.Event()
        applied = []

        async def search(query):
            if query == "slow":
                await release_first.wait()
            return [query]

        session = DebouncedSearch(search, on_results=lambda q, r: applied.append(q), delay=0)
        session.submit("slow")
        await asyncio.sleep(0.01)
        session.submit("fast")
        await session.wait()
        release_first.set()
        await asyncio.sleep(0.01)

        self.assertEqual(applied, ["fast"])
        self.assertEqual(session.results, ["fast"])

    async def test_blank_query_clears_without_searching(self):
        calls = []

        async def search(query):
            calls.append(query)
            return [query]

        session = DebouncedSearch(search, delay=0.01)
        session.submit("incep")
        await session.wait()
        session.submit("   ")
        await session.wait()

        self.assertEqual(calls, ["incep"])
        self.assertEqual(session.results, [])

    async def test_error_goes_to_handler(self):
        errors = []

        async def search(query):
            raise RuntimeError("upstream down")

        session = DebouncedSearch(search, on_error=lambda q, e: errors.append((q, str(e))), delay=0)
        session.submit("incep")
        await session.wait()

        self.assertEqual(errors, [("incep", "upstream down")])
        self.assertIsInstance(session.error, RuntimeError)

    async def test_error_is_raised_from_wait_without_handler(self):
        async def search(query):
            raise RuntimeError("upstream down")

        session = DebouncedSearch(search, delay=0)
        session.submit("incep")
        with self.assertRaises(RuntimeError):
            await session.wait()

    async def test_unawaited_failure_is_logged(self):
        async def search(query):
            raise RuntimeError("upstream down")

        session = DebouncedSearch(search, delay=0)
        with self.assertLogs("reeltrack.search", "ERROR") as logs:
            session.submit("incep")
            for _ in range(5):
                await asyncio.sleep(0)

        self.assertIn("upstream down", logs.output[0])
        self.assertIsInstance(session.error, RuntimeError)
