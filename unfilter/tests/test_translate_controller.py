import os
import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from unfilter.config import Settings
from unfilter.config.settings import REQUIRED_ENV
from unfilter.main import app
from unfilter.models.translate_request_model import StoreOutcome
from unfilter.services.errors import UpstreamError
from unfilter.services.openai_client_service import OpenAIClient
from unfilter.services.pipeline_service import TranslationPipeline
from unfilter.services.record_service import RecordService


FULL_RAW = {
    "api_keys": {"openai": "sk-secret-value", "airtable": "pat-secret-value"},
    "airtable": {"base_id": "appBASE", "table_id": "tblTABLE"},
    "cors": {"allowed_origin": "https://unfilter-the-hr.vercel.app"},
    "rate_limit": {"per_window": 2, "window_seconds": 60},
}


class TestTranslateController(unittest.TestCase):
    def setUp(self):
        env = patch.dict(os.environ)
        env.start()
        self.addCleanup(env.stop)
        for key in REQUIRED_ENV + ("MODEL", "ALLOWED_ORIGIN", "RATE_LIMIT_PER_MIN", "TONE", "DEBUG_ENDPOINT"):
            os.environ.pop(key, None)

        self.use_settings(FULL_RAW)
        self.client = TestClient(app)

    def use_settings(self, raw):
        settings = Settings(raw=raw)
        self.openai = MagicMock(spec=OpenAIClient)
        self.openai.settings = settings
        self.openai.chat_completion.return_value = "We will ignore this forever."
        self.records = MagicMock(spec=RecordService)
        self.records.add_record.return_value = StoreOutcome(ok=True)
        pipeline = TranslationPipeline(settings=settings, openai_client=self.openai, record_service=self.records)

        for target, value in (
            ("unfilter.controllers.translate_controller.get_pipeline", lambda: pipeline),
            ("unfilter.controllers.translate_controller.load_settings", lambda: settings),
        ):
            p = patch(target, value)
            p.start()
            self.addCleanup(p.stop)

    def assert_cors(self, resp, origin="https://unfilter-the-hr.vercel.app", methods="POST, OPTIONS"):
        self.assertEqual(resp.headers["access-control-allow-origin"], origin)
        self.assertEqual(resp.headers["access-control-allow-methods"], methods)
        self.assertEqual(resp.headers["access-control-allow-headers"], "Content-Type")
        self.assertIn("Origin", resp.headers["vary"])

    def test_translate_success(self):
        resp = self.client.post("/api/translate", json={"phrase": "let's circle back"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {
            "translation": "We will ignore this forever.",
            "model": "gpt-4o-mini",
            "store": {"ok": True},
        })
        self.assert_cors(resp)

    def test_store_failure_still_200(self):
        self.records.add_record.return_value = StoreOutcome(ok=False, detail="NOT_FOUND")
        resp = self.client.post("/api/translate", json={"phrase": "low-hanging fruit"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["store"], {"ok": False, "detail": "NOT_FOUND"})
        self.assertEqual(resp.json()["translation"], "We will ignore this forever.")

    def test_preflight(self):
        resp = self.client.options("/api/translate")
        self.assertEqual(resp.status_code, 204)
        self.assertEqual(resp.content, b"")
        self.assert_cors(resp)

    def test_origin_is_never_reflected(self):
        resp = self.client.post(
            "/api/translate",
            json={"phrase": "synergy"},
            headers={"Origin": "https://evil.example"},
        )
        self.assert_cors(resp)

    def test_permissive_origin(self):
        self.use_settings(dict(FULL_RAW, cors={"allowed_origin": "*"}))
        resp = self.client.options("/api/translate", headers={"Origin": "https://anything.example"})
        self.assertEqual(resp.headers["access-control-allow-origin"], "*")

    def test_bad_bodies_are_400(self):
        for kwargs, error in (
            ({"content": b"{not json", "headers": {"Content-Type": "application/json"}}, "Invalid JSON body"),
            ({"json": {}}, "Missing phrase"),
            ({"json": {"phrase": ""}}, "Missing phrase"),
            ({"json": {"phrase": 12}}, "Missing phrase"),
        ):
            resp = self.client.post("/api/translate", **kwargs)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.json(), {"error": error})
        self.openai.chat_completion.assert_not_called()
        self.records.add_record.assert_not_called()

    def test_rate_limit_by_forwarded_for(self):
        headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
        for _ in range(2):
            self.assertEqual(self.client.post("/api/translate", json={"phrase": "synergy"}, headers=headers).status_code, 200)
        resp = self.client.post("/api/translate", json={"phrase": "synergy"}, headers=headers)
        self.assertEqual(resp.status_code, 429)
        self.assertEqual(resp.json(), {"error": "Too many requests. Please wait a minute and try again."})
        self.assert_cors(resp)

        other = self.client.post("/api/translate", json={"phrase": "synergy"}, headers={"X-Forwarded-For": "198.51.100.2"})
        self.assertEqual(other.status_code, 200)

    def test_requests_without_forwarded_for_share_peer_bucket(self):
        # TestClient connects from the peer "testclient"
        for _ in range(2):
            self.assertEqual(self.client.post("/api/translate", json={"phrase": "synergy"}).status_code, 200)
        resp = self.client.post("/api/translate", json={"phrase": "synergy"}, headers={"X-Forwarded-For": ""})
        self.assertEqual(resp.status_code, 429)
        self.assertEqual(self.openai.chat_completion.call_count, 2)

        forwarded = self.client.post("/api/translate", json={"phrase": "synergy"}, headers={"X-Forwarded-For": "198.51.100.9"})
        self.assertEqual(forwarded.status_code, 200)

    def test_missing_configuration_is_500_without_secrets(self):
        self.use_settings({"api_keys": {"openai": "sk-secret-value"}})
        resp = self.client.post("/api/translate", json={"phrase": "synergy"})
        self.assertEqual(resp.status_code, 500)
        self.assertTrue(resp.json()["error"].startswith("Missing env vars:"))
        self.assertNotIn("sk-secret-value", resp.text)
        self.openai.chat_completion.assert_not_called()

    def test_upstream_failure_is_502(self):
        self.openai.chat_completion.side_effect = UpstreamError(status=503, body="The server is overloaded")
        resp = self.client.post("/api/translate", json={"phrase": "synergy"})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json(), {"error": "OpenAI error", "detail": "The server is overloaded"})
        self.records.add_record.assert_not_called()

    def test_unexpected_failure_is_500(self):
        self.openai.chat_completion.side_effect = RuntimeError("boom")
        resp = self.client.post("/api/translate", json={"phrase": "synergy"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Server error", "detail": "boom"})

    def test_get_without_debug_is_405(self):
        for resp in (
            self.client.get("/api/translate"),
            self.client.get("/api/translate", params={"debug": "1"}),
            self.client.put("/api/translate", json={"phrase": "x"}),
            self.client.delete("/api/translate"),
            self.client.patch("/api/translate", json={"phrase": "x"}),
            self.client.request("TRACE", "/api/translate"),
        ):
            self.assertEqual(resp.status_code, 405)
            self.assertEqual(resp.json(), {"error": "Method not allowed. Use POST."})
            self.assert_cors(resp)

        head = self.client.head("/api/translate")
        self.assertEqual(head.status_code, 405)
        self.assert_cors(head)
        self.openai.chat_completion.assert_not_called()

    def test_debug_report_masks_secrets(self):
        self.use_settings(dict(FULL_RAW, debug={"enabled": True}))
        resp = self.client.get("/api/translate", params={"debug": "1"})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["ok"])
        self.assertEqual(body["env"], {
            "OPENAI_API_KEY": "present",
            "AIRTABLE_TOKEN": "present",
            "AIRTABLE_BASE_ID": "present",
            "AIRTABLE_TABLE_ID": "present",
        })
        self.assertNotIn("secret-value", resp.text)
        self.assertNotIn("appBASE", resp.text)
        self.assert_cors(resp, methods="POST, GET, OPTIONS")

        self.assertEqual(self.client.get("/api/translate").status_code, 405)


class TestHealthController(unittest.TestCase):
    def test_health_reports_presence_only(self):
        settings = Settings(raw={"api_keys": {"openai": "sk-secret-value"}})
        with patch.dict(os.environ), patch("unfilter.config.load_settings", return_value=settings):
            for key in REQUIRED_ENV:
                os.environ.pop(key, None)
            resp = TestClient(app).get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "degraded")
        self.assertTrue(resp.json()["checks"]["api_keys"]["openai"])
        self.assertFalse(resp.json()["checks"]["api_keys"]["airtable"])
        self.assertEqual(resp.json()["checks"]["airtable"], {"base_id": False, "table_id": False})
        self.assertNotIn("sk-secret-value", resp.text)

    def test_health_ok_when_environment_supplies_everything(self):
        env = {"OPENAI_API_KEY": "sk-env", "AIRTABLE_TOKEN": "pat-env", "AIRTABLE_BASE_ID": "appX", "AIRTABLE_TABLE_ID": "tblX"}
        with patch.dict(os.environ, env), patch("unfilter.config.load_settings", return_value=Settings(raw={})):
            resp = TestClient(app).get("/health")
        self.assertEqual(resp.json()["status"], "ok")
        self.assertNotIn("sk-env", resp.text)


if __name__ == "__main__":
    unittest.main()
