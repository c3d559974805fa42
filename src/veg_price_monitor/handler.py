from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .aggregator import fetch_all_categories, fetch_products, make_client
from .config import DEFAULT_CONFIG_PATH, Config, ConfigError, load_config
from .debug import debug_url
from .http_client import HttpClient
from .render import render_product_list_html
from .selfcheck import run_self_check


MODES = ("normal", "debug", "test")

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
JSON_HEADERS = {"Content-Type": "application/json; charset=utf-8", **_CORS_HEADERS}
HTML_HEADERS = {"Content-Type": "text/html; charset=utf-8", **_CORS_HEADERS}


@dataclass(frozen=True)
class FunctionRequest:
    url: str = ""
    cookie: str = ""
    mode: str = ""

    @classmethod
    def from_event(cls, event: Any) -> "FunctionRequest":
        if isinstance(event, (bytes, bytearray)):
            event = event.decode("utf-8", errors="replace")
        if isinstance(event, str):
            try:
                event = json.loads(event) if event.strip() else {}
            except json.JSONDecodeError:
                event = {}
        if not isinstance(event, dict):
            event = {}
        return cls(
            url=str(event.get("url") or "").strip(),
            cookie=str(event.get("cookie") or "").strip(),
            mode=str(event.get("mode") or "").strip().lower(),
        )

    def to_event(self) -> dict[str, str]:
        return {"url": self.url, "cookie": self.cookie, "mode": self.mode}


@dataclass(frozen=True)
class FunctionResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"statusCode": self.status_code, "headers": dict(self.headers), "body": self.body}


def _json_response(status_code: int, payload: Any) -> FunctionResponse:
    return FunctionResponse(status_code=status_code, headers=dict(JSON_HEADERS), body=json.dumps(payload, ensure_ascii=False, allow_nan=False))


def _error(status_code: int, message: str) -> FunctionResponse:
    return _json_response(status_code, {"error": message})


def _effective_config(cfg: Config, request: FunctionRequest) -> Config:
    if request.cookie:
        cfg = replace(cfg, cookie=request.cookie)
    return cfg


def run_normal(client: HttpClient, url: str) -> dict[str, Any]:
    result: dict[str, Any] = {"mode": "normal", "url": url, "message": "products fetched"}
    try:
        products = fetch_products(client, url)
    except Exception as e:
        result["status"] = "failed"
        result["error"] = f"{type(e).__name__}: {e}"
        return result
    result["status"] = "success"
    result["total_products"] = len(products)
    result["products"] = [p.to_dict() for p in products]
    return result


def handle_request(
    request: FunctionRequest,
    *,
    config_path: str | Path = DEFAULT_CONFIG_PATH,
    client: HttpClient | None = None,
) -> FunctionResponse:
    """JSON entry point. ``mode`` picks normal extraction, page diagnostics or the self-check."""
    try:
        cfg = _effective_config(load_config(config_path), request)
    except ConfigError as e:
        return _error(500, f"config: {e}")

    mode = request.mode or "normal"
    if mode not in MODES:
        return _error(400, f"invalid mode {request.mode!r}; expected one of: {', '.join(MODES)}")

    url = request.url or cfg.url_fv
    if mode == "test":
        result = run_self_check()
    elif mode == "debug":
        result = debug_url(client or make_client(cfg), url)
    else:
        result = run_normal(client or make_client(cfg), url)

    try:
        return _json_response(200, result)
    except (TypeError, ValueError) as e:
        return _error(500, f"serialize: {e}")


def handle_html_request(
    request: FunctionRequest,
    *,
    config_path: str | Path = DEFAULT_CONFIG_PATH,
    client: HttpClient | None = None,
) -> FunctionResponse:
    """HTML entry point: every category, rendered as one page."""
    try:
        cfg = _effective_config(load_config(config_path), request)
    except ConfigError as e:
        return _error(500, f"config: {e}")

    categories = fetch_all_categories(cfg, client=client)
    return FunctionResponse(status_code=200, headers=dict(HTML_HEADERS), body=render_product_list_html(categories))


def handler(event: Any, context: Any = None) -> dict[str, Any]:
    """Serverless runtime hook (event in, ``{statusCode, headers, body}`` out)."""
    return handle_html_request(FunctionRequest.from_event(event)).to_dict()
