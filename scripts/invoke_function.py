from __future__ import annotations

import json
import os
import sys

import requests

from veg_price_monitor.handler import MODES, FunctionRequest


def invoke(function_url: str, request: FunctionRequest, *, timeout: float) -> None:
    resp = requests.post(function_url, json=request.to_event(), timeout=timeout)
    print(f"HTTP {resp.status_code} {resp.headers.get('Content-Type', '')}", flush=True)
    try:
        envelope = resp.json()
    except ValueError:
        print(resp.text[:2000], flush=True)
        return
    if isinstance(envelope, dict) and "statusCode" in envelope:
        print(f"statusCode={envelope.get('statusCode')} headers={envelope.get('headers')}", flush=True)
        print(str(envelope.get("body", ""))[:2000], flush=True)
    else:
        print(json.dumps(envelope, ensure_ascii=False, indent=2)[:2000], flush=True)


def main() -> int:
    function_url = os.getenv("FUNCTION_URL", "").strip()
    if not function_url:
        print("Set FUNCTION_URL to the deployed function's HTTP trigger.", file=sys.stderr, flush=True)
        return 2

    url = os.getenv("FUNCTION_TARGET_URL", "").strip()
    cookie = os.getenv("FUNCTION_COOKIE", "").strip()
    timeout = float(os.getenv("FUNCTION_TIMEOUT_SECONDS", "60"))
    modes = [m.strip() for m in os.getenv("FUNCTION_MODES", "").split(",") if m.strip()] or list(MODES)

    failures = 0
    for mode in modes:
        print(f"\n== mode={mode}", flush=True)
        try:
            invoke(function_url, FunctionRequest(url=url, cookie=cookie, mode=mode), timeout=timeout)
        except requests.RequestException as e:
            failures += 1
            print(f"request failed: {type(e).__name__}: {e}", flush=True)
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
