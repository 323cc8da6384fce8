import unittest

from fastapi.testclient import TestClient

from fakes import FakeTmdb
from reeltrack.core.config import Settings
from reeltrack.main import create_app


def _settings(**overrides) -> Settings:
    values = {
        "TMDB_API_KEY": "test-key",
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "SECRET_KEY": "test-secret",
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


class TestCatalogApi(unittest.TestCase):
    def setUp(self) -> None:
        self.tmdb = FakeTmdb()
        self.client = TestClient(create_app(_settings(), transport=self.tmdb.transport()))
        self.client.__enter__()

    def tearDown(self) -> None:
        self.client.__exit__(None, None, None)

    def test_movie_detail(self):
        resp = self.client.get("/catalog/movie", params={"id": 27205})
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["externalId"], 27205)
        self.assertEqual(body["title"], "Inception")
        self.assertEqual(body["year"], 2010)
        self.assertEqual(len(body["topCast"]), 3)
        self.assertEqual(body["imageUrl"], "https://image.tmdb.org/t/p/w500/inception.jpg")
        self.assertNotIn("createdAt", body)

    def test_tv_detail(self):
        resp = self.client.get("/catalog/tv", params={"id": "1396"})
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["title"], "Breaking Bad")
        self.assertEqual(body["networks"], ["AMC"])
        self.assertEqual(body["status"], "Ended")
        self.assertNotIn("nextAirDate", body)

    def test_missing_id_is_400(self):
        for path in ("/catalog/movie", "/catalog/tv"):
            resp = self.client.get(path)
            self.assertEqual(resp.status_code, 400)
            self.assertIn("id", resp.json()["error"])
        self.assertEqual(self.tmdb.requests, [])

    def test_non_ascii_digit_id_is_400(self):
        for raw in ("²", "٣٤", "27205²"):
            resp = self.client.get("/catalog/movie", params={"id": raw})
            self.assertEqual(resp.status_code, 400)
            self.assertIn("Invalid id", resp.json()["error"])
        self.assertEqual(self.tmdb.requests, [])

    def test_upstream_404_is_502(self):
        resp = self.client.get("/catalog/movie", params={"id": 404})
        self.assertEqual(resp.status_code, 502)
        self.assertIn("404", resp.json()["error"])

    def test_search(self):
        resp = self.client.get("/catalog/search", params={"type": "movie", "query": "incep"})
        self.assertEqual(resp.status_code, 200, resp.text)
        results = resp.json()["results"]
        self.assertEqual(results[0]["externalId"], 27205)
        self.assertEqual(results[0]["title"], "Inception")
        self.assertEqual(results[0]["year"], 2010)

    def test_search_tv_and_default_type(self):
        resp = self.client.get("/catalog/search", params={"type": "tv", "query": "breaking"})
        self.assertEqual(resp.json()["results"][0]["externalId"], 1396)

        self.client.get("/catalog/search", params={"type": "bogus", "query": "x"})
        self.assertEqual(self.tmdb.paths()[-1], "/3/search/movie")

    def test_blank_search_is_empty_200(self):
        for params in ({"query": ""}, {"query": "   "}, {}):
            resp = self.client.get("/catalog/search", params=params)
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.json(), {"results": []})
        self.assertEqual(self.tmdb.requests, [])

    def test_trending(self):
        resp = self.client.get("/catalog/trending", params={"type": "tv", "window": "week"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(self.tmdb.paths(), ["/3/trending/tv/week"])
        self.assertEqual(resp.json()["results"][0]["mediaType"], "tv")

    def test_trending_defaults(self):
        self.client.get("/catalog/trending", params={"type": "other", "window": "month"})
        self.assertEqual(self.tmdb.paths(), ["/3/trending/movie/day"])


class TestNotConfigured(unittest.TestCase):
    def test_every_gateway_endpoint_is_500(self):
        tmdb = FakeTmdb()
        app = create_app(_settings(TMDB_API_KEY=None), transport=tmdb.transport())
        with TestClient(app) as client:
            for path, params in (
                ("/catalog/movie", {"id": 1}),
                ("/catalog/tv", {"id": 1}),
                ("/catalog/search", {"query": "incep"}),
                ("/catalog/trending", {}),
            ):
                resp = client.get(path, params=params)
                self.assertEqual(resp.status_code, 500, path)
                self.assertIn("TMDB_API_KEY", resp.json()["error"])
        self.assertEqual(tmdb.requests, [])


class TestWatchlistApi(unittest.TestCase):
    def setUp(self) -> None:
        self.tmdb = FakeTmdb()
        self.client = TestClient(create_app(_settings(), transport=self.tmdb.transport()))
        self.client.__enter__()

    def tearDown(self) -> None:
        self.client.__exit__(None, None, None)

    def _sign_in(self) -> str:
        resp = self.client.post("/auth/anonymous")
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["user_id"]

    def test_requires_session(self):
        resp = self.client.get("/user/watchlist/movie")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Not signed in"})

    def test_anonymous_sign_in_is_stable(self):
        user_id = self._sign_in()
        again = self.client.post("/auth/anonymous").json()
        self.assertEqual(again["user_id"], user_id)
        self.assertFalse(again["created"])
        self.assertEqual(again["theme"], "dark")

        status = self.client.get("/auth/status").json()
        self.assertEqual(status, {"signed_in": True, "user_id": user_id})

        self.client.post("/auth/logout")
        self.assertFalse(self.client.get("/auth/status").json()["signed_in"])

    def test_add_list_remove(self):
        self._sign_in()

        resp = self.client.post("/user/watchlist/movie/27205")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertTrue(resp.json()["added"])
        self.assertEqual(resp.json()["item"]["title"], "Inception")

        items = self.client.get("/user/watchlist/movie").json()["items"]
        self.assertEqual([i["externalId"] for i in items], [27205])
        self.assertIn("updatedAt", items[0])
        self.assertEqual(self.client.get("/user/watchlist/tv").json()["items"], [])

        resp = self.client.delete("/user/watchlist/movie/27205")
        self.assertEqual(resp.json(), {"removed": True})
        self.assertEqual(self.client.get("/user/watchlist/movie").json()["items"], [])

    def test_add_unknown_title_is_502_and_writes_nothing(self):
        self._sign_in()

        resp = self.client.post("/user/watchlist/tv/404")
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(self.client.get("/user/preferences").json()["tvShowIds"], [])

    def test_unknown_kind_is_400(self):
        self._sign_in()
        resp = self.client.get("/user/watchlist/podcast")
        self.assertEqual(resp.status_code, 400)

    def test_preferences_and_theme(self):
        self._sign_in()
        self.client.post("/user/watchlist/tv/1396")

        prefs = self.client.get("/user/preferences").json()
        self.assertEqual(prefs, {"theme": "dark", "movieIds": [], "tvShowIds": [1396]})

        resp = self.client.put("/user/preferences/theme", json={"theme": "light"})
        self.assertEqual(resp.json(), {"theme": "light"})
        self.assertEqual(self.client.get("/user/preferences").json()["theme"], "light")

        resp = self.client.put("/user/preferences/theme", json={"theme": "neon"})
        self.assertEqual(resp.status_code, 400)

    def test_users_do_not_see_each_other(self):
        first = self._sign_in()
        self.client.post("/user/watchlist/movie/27205")

        self.client.post("/auth/logout")
        second = self._sign_in()
        self.assertNotEqual(first, second)
        self.assertEqual(self.client.get("/user/watchlist/movie").json()["items"], [])
