from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from veg_price_monitor.handler import FunctionRequest, FunctionResponse, handle_html_request, handle_request, handler
from veg_price_monitor.http_client import FetchResult


PAGE = """
<div class="index_picAD">
  <div><a href="/goods/7"></a><h3>茄子</h3><span class="price">￥4.00</span><span class="spec">2斤</span></div>
  <div><h3>金针菇</h3><span class="price">￥3.50</span><span class="spec">1袋</span></div>
</div>
"""


class StaticClient:
    def __init__(self, text: str | None, *, error: str | None = None) -> None:
        self._text = text
        self._error = error
        self.urls: list[str] = []

    def fetch_text(self, url: str) -> FetchResult:
        self.urls.append(url)
        if self._text is None:
            return FetchResult(url=url, status_code=503, ok=False, text=None, error=self._error or "HTTP 503", elapsed_ms=1)
        return FetchResult(url=url, status_code=200, ok=True, text=self._text, error=None, elapsed_ms=1)


class TestHandler(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "config.json"
        self.config_path.write_text(
            json.dumps(
                {
                    "url_fv": "https://example.test/fv",
                    "url_lv": "https://example.test/lv",
                    "url_rv": "https://example.test/rv",
                    "url_m": "https://example.test/m",
                    "url_c": "https://example.test/c",
                    "cookie": "scsmdid=012",
                }
            ),
            encoding="utf-8",
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_normal_mode_returns_products(self) -> None:
        client = StaticClient(PAGE)
        resp = handle_request(FunctionRequest(mode="normal"), config_path=self.config_path, client=client)

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["Content-Type"], "application/json; charset=utf-8")
        self.assertEqual(resp.headers["Access-Control-Allow-Origin"], "*")
        body = json.loads(resp.body)
        self.assertEqual(body["status"], "success")
        self.assertEqual(body["total_products"], 2)
        self.assertEqual(body["products"][0]["name"], "茄子")
        self.assertEqual(body["products"][0]["price_per_jin"], 2.0)
        self.assertEqual(body["products"][1]["unit"], "元/袋")
        self.assertEqual(client.urls, ["https://example.test/fv"])

    def test_empty_mode_is_normal(self) -> None:
        resp = handle_request(FunctionRequest(), config_path=self.config_path, client=StaticClient(PAGE))
        self.assertEqual(json.loads(resp.body)["mode"], "normal")

    def test_normal_mode_reports_failure(self) -> None:
        client = StaticClient(None, error="HTTP 503")
        resp = handle_request(FunctionRequest(mode="normal"), config_path=self.config_path, client=client)

        self.assertEqual(resp.status_code, 200)
        body = json.loads(resp.body)
        self.assertEqual(body["status"], "failed")
        self.assertIn("HTTP 503", body["error"])

    def test_debug_mode(self) -> None:
        resp = handle_request(
            FunctionRequest(mode="debug", url="https://example.test/other"),
            config_path=self.config_path,
            client=StaticClient(PAGE),
        )
        body = json.loads(resp.body)
        self.assertEqual(body["mode"], "debug")
        self.assertEqual(body["url"], "https://example.test/other")
        self.assertTrue(body["container_found"])
        self.assertEqual(body["product_count"], 2)

    def test_test_mode(self) -> None:
        resp = handle_request(FunctionRequest(mode="test"), config_path=self.config_path)
        body = json.loads(resp.body)
        self.assertEqual(body["mode"], "test")
        self.assertTrue(body["passed"])

    def test_invalid_mode(self) -> None:
        resp = handle_request(FunctionRequest(mode="bulk"), config_path=self.config_path)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("invalid mode", json.loads(resp.body)["error"])

    def test_missing_config(self) -> None:
        resp = handle_request(FunctionRequest(mode="test"), config_path=Path(self._tmp.name) / "absent.json")
        self.assertEqual(resp.status_code, 500)
        self.assertIn("config", json.loads(resp.body)["error"])

    def test_html_request_renders_all_categories(self) -> None:
        resp = handle_html_request(FunctionRequest(), config_path=self.config_path, client=StaticClient(PAGE))

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["Content-Type"], "text/html; charset=utf-8")
        for name in ("瓜果花菜类", "叶菜类", "根茎类", "菌菇类", "调味菜"):
            self.assertIn(name, resp.body)
        self.assertIn("茄子", resp.body)

    def test_overflowing_price_serializes_as_strict_json(self) -> None:
        page = '<div class="index_picAD"><div><h3>大白菜</h3><span class="price">' + "9" * 400 + "</span></div></div>"
        resp = handle_request(FunctionRequest(mode="normal"), config_path=self.config_path, client=StaticClient(page))

        body = json.loads(resp.body, parse_constant=self.fail)
        self.assertEqual(body["products"][0]["price"], 0.0)
        self.assertEqual(body["products"][0]["price_per_jin"], 0.0)

    def test_non_finite_result_is_a_serialize_error(self) -> None:
        report = {"mode": "test", "passed": True, "tests": {"ratio": float("nan")}}
        with mock.patch("veg_price_monitor.handler.run_self_check", return_value=report):
            resp = handle_request(FunctionRequest(mode="test"), config_path=self.config_path)

        self.assertEqual(resp.status_code, 500)
        self.assertIn("serialize", json.loads(resp.body)["error"])

    def test_html_request_keeps_configured_category_urls(self) -> None:
        client = StaticClient(PAGE)
        handle_html_request(FunctionRequest(url="https://example.test/other"), config_path=self.config_path, client=client)

        self.assertEqual(
            sorted(client.urls),
            sorted(f"https://example.test/{k}" for k in ("fv", "lv", "rv", "m", "c")),
        )

    def test_from_event(self) -> None:
        req = FunctionRequest.from_event('{"mode": "DEBUG", "url": " https://example.test/x ", "cookie": "a=1"}')
        self.assertEqual(req, FunctionRequest(url="https://example.test/x", cookie="a=1", mode="debug"))
        self.assertEqual(FunctionRequest.from_event(b""), FunctionRequest())
        self.assertEqual(FunctionRequest.from_event("not json"), FunctionRequest())
        self.assertEqual(FunctionRequest.from_event(None), FunctionRequest())

    def test_to_event_is_accepted_by_from_event(self) -> None:
        req = FunctionRequest(url="https://example.test/fv", cookie="scsmdid=012", mode="debug")
        self.assertEqual(FunctionRequest.from_event(json.dumps(req.to_event())), req)

    def test_runtime_hook_returns_envelope_dict(self) -> None:
        canned = FunctionResponse(status_code=200, headers={"Content-Type": "text/html; charset=utf-8"}, body="<html></html>")
        with mock.patch("veg_price_monitor.handler.handle_html_request", return_value=canned) as fake:
            out = handler('{"mode": "normal"}', None)

        fake.assert_called_once_with(FunctionRequest(mode="normal"))
        self.assertEqual(out, {"statusCode": 200, "headers": {"Content-Type": "text/html; charset=utf-8"}, "body": "<html></html>"})


if __name__ == "__main__":
    unittest.main()
