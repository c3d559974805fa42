from __future__ import annotations

import os
import sys

from veg_price_monitor.aggregator import make_client, scrape_category
from veg_price_monitor.categories import CATEGORY_SOURCES
from veg_price_monitor.config import get_config
from veg_price_monitor.render import format_money, unit_price_text


def main() -> int:
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")
    except Exception:
        pass

    cfg = get_config(os.getenv("LIVE_CONFIG", "config.json"))
    only = {c.strip() for c in os.getenv("LIVE_CATEGORIES", "").split(",") if c.strip()}
    max_products = int(os.getenv("LIVE_MAX_PRODUCTS", "20"))
    client = make_client(cfg)

    total_products = 0
    total_packaged = 0
    errors: list[str] = []

    for source in CATEGORY_SOURCES:
        if only and source.id not in only:
            continue
        url = cfg.url_for(source)
        run = scrape_category(client, source, url)
        print(f"\n== {source.id} ({source.name}) :: {url}", flush=True)
        print(f"ok={run.ok} products={len(run.products)} error={run.error} {run.duration_ms}ms", flush=True)
        if not run.ok:
            errors.append(f"  ✗ {source.id}: {run.error}")

        packaged = sum(1 for p in run.products if p.is_packaged)
        print(f"  Pricing: {len(run.products) - packaged} by weight, {packaged} by package", flush=True)

        for p in run.products[:max_products]:
            print(f"- {p.name} | {format_money(p.price)} | spec={p.spec} | {unit_price_text(p)} | {p.id}", flush=True)
        if len(run.products) > max_products:
            print(f"  ... and {len(run.products) - max_products} more products", flush=True)

        total_products += len(run.products)
        total_packaged += packaged

    print(f"\n{'='*60}", flush=True)
    print(f"Total products: {total_products}", flush=True)
    print(f"  By weight: {total_products - total_packaged}", flush=True)
    print(f"  By package: {total_packaged}", flush=True)
    if errors:
        print(f"\nErrors ({len(errors)}):", flush=True)
        for e in errors:
            print(e, flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
