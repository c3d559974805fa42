from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

from .categories import CATEGORY_SOURCES
from .config import Config
from .http_client import HttpClient
from .models import Category, CategoryRun, CategorySource, Product
from .parsers.listing import ListingParser


def _log_enabled() -> bool:
    return os.getenv("VEG_PRICE_LOG", "1").strip() != "0"


def make_client(cfg: Config) -> HttpClient:
    return HttpClient(timeout_seconds=float(cfg.timeout), cookie=cfg.cookie, user_agent=cfg.user_agent)


def fetch_products(client: HttpClient, url: str, *, parser: ListingParser | None = None) -> list[Product]:
    """Fetch one category page and extract its products.

    Raises ``RuntimeError`` when the page cannot be fetched and
    ``ContainerNotFoundError`` when it has no product container.
    """
    fetch = client.fetch_text(url)
    if not fetch.ok or fetch.text is None:
        raise RuntimeError(fetch.error or "fetch failed")
    return (parser or ListingParser()).parse(fetch.text)


def scrape_category(
    client: HttpClient,
    source: CategorySource,
    url: str,
    *,
    parser: ListingParser | None = None,
) -> CategoryRun:
    started = time.perf_counter()
    if not url:
        return CategoryRun(category=source, ok=False, error="missing url", duration_ms=0, products=[])
    try:
        products = fetch_products(client, url, parser=parser)
    except Exception as e:
        duration_ms = int((time.perf_counter() - started) * 1000)
        return CategoryRun(category=source, ok=False, error=f"{type(e).__name__}: {e}", duration_ms=duration_ms, products=[])
    duration_ms = int((time.perf_counter() - started) * 1000)
    return CategoryRun(category=source, ok=True, error=None, duration_ms=duration_ms, products=products)


def run_categories(
    cfg: Config,
    *,
    client: HttpClient | None = None,
    parser: ListingParser | None = None,
) -> list[CategoryRun]:
    """Scrape every category in parallel and return the runs in category order."""
    client = client or make_client(cfg)
    parser = parser or ListingParser()
    log_enabled = _log_enabled()
    if log_enabled:
        print(f"[aggregate] start categories={len(CATEGORY_SOURCES)} timeout={cfg.timeout}s", flush=True)

    runs: dict[str, CategoryRun] = {}
    with ThreadPoolExecutor(max_workers=len(CATEGORY_SOURCES)) as ex:
        futures = {
            ex.submit(scrape_category, client, source, cfg.url_for(source), parser=parser): source
            for source in CATEGORY_SOURCES
        }
        for fut in as_completed(futures):
            source = futures[fut]
            try:
                run = fut.result()
            except Exception as e:
                run = CategoryRun(category=source, ok=False, error=f"{type(e).__name__}: {e}", duration_ms=0, products=[])
            runs[source.id] = run
            if log_enabled:
                if run.ok:
                    print(f"[{source.id}] ok products={len(run.products)} {run.duration_ms}ms", flush=True)
                else:
                    print(f"[{source.id}] error products=0 {run.duration_ms}ms :: {run.error}", flush=True)

    ordered = [runs[source.id] for source in CATEGORY_SOURCES]
    if log_enabled:
        total = sum(len(r.products) for r in ordered)
        failed = sum(1 for r in ordered if not r.ok)
        print(f"[aggregate] done total_products={total} failed_categories={failed}", flush=True)
    return ordered


def fetch_all_categories(
    cfg: Config,
    *,
    client: HttpClient | None = None,
    parser: ListingParser | None = None,
) -> list[Category]:
    runs = run_categories(cfg, client=client, parser=parser)
    return [Category(id=r.category.id, name=r.category.name, products=list(r.products)) for r in runs]
