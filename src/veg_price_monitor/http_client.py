from __future__ import annotations

import threading
import time
from dataclasses import dataclass

import requests
from requests import Response
from requests.adapters import HTTPAdapter


DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"


@dataclass(frozen=True)
class FetchResult:
    url: str
    status_code: int | None
    ok: bool
    text: str | None
    error: str | None
    elapsed_ms: int


class HttpClient:
    """
    Thin GET-only client for the store's category pages.

    The store keys its catalogue on the selected branch, which lives in a cookie,
    so every request carries the configured ``Cookie`` header. Each request is a
    single attempt bounded by ``timeout_seconds``.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float,
        cookie: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._cookie = cookie or None
        self._user_agent = user_agent or DEFAULT_USER_AGENT

        # One session per worker thread; sessions are not safe to share across threads.
        self._local = threading.local()

    def _session(self) -> requests.Session:
        sess = getattr(self._local, "session", None)
        if isinstance(sess, requests.Session):
            return sess
        s = requests.Session()
        adapter = HTTPAdapter(pool_connections=8, pool_maxsize=8)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        self._local.session = s
        return s

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self._user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }
        if self._cookie:
            headers["Cookie"] = self._cookie
        return headers

    def fetch_text(self, url: str) -> FetchResult:
        started = time.perf_counter()
        try:
            resp: Response = self._session().get(
                url,
                headers=self._headers(),
                timeout=(self._timeout_seconds, self._timeout_seconds),
                allow_redirects=True,
            )
        except Exception as e:
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            return FetchResult(
                url=url,
                status_code=None,
                ok=False,
                text=None,
                error=f"{type(e).__name__}: {e}",
                elapsed_ms=elapsed_ms,
            )

        # requests assumes ISO-8859-1 for text/* without a charset; the store serves UTF-8/GBK.
        if isinstance(resp.encoding, str) and resp.encoding.lower() == "iso-8859-1":
            resp.encoding = resp.apparent_encoding
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        ok = 200 <= resp.status_code < 400
        return FetchResult(
            url=str(resp.url),
            status_code=resp.status_code,
            ok=ok,
            text=resp.text if ok else None,
            error=None if ok else f"HTTP {resp.status_code}",
            elapsed_ms=elapsed_ms,
        )
