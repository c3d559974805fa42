from __future__ import annotations

import os
import unittest
from concurrent.futures import ThreadPoolExecutor, as_completed

from veg_price_monitor.aggregator import make_client, scrape_category
from veg_price_monitor.categories import CATEGORY_SOURCES
from veg_price_monitor.config import get_config


class TestLiveSites(unittest.TestCase):
    @unittest.skipUnless(os.getenv("RUN_LIVE_TESTS", "").strip() == "1", "Set RUN_LIVE_TESTS=1 to enable live fetch tests.")
    def test_categories_return_products(self) -> None:
        cfg = get_config(os.getenv("LIVE_CONFIG", "config.json"))
        wanted = {c.strip() for c in os.getenv("LIVE_CATEGORIES", "").split(",") if c.strip()}
        sources = [s for s in CATEGORY_SOURCES if not wanted or s.id in wanted]
        allow_errors = os.getenv("LIVE_ALLOW_ERRORS", "").strip() == "1"

        client = make_client(cfg)
        failures: list[str] = []

        with ThreadPoolExecutor(max_workers=len(sources) or 1) as ex:
            futs = {ex.submit(scrape_category, client, s, cfg.url_for(s)): s for s in sources}
            for fut in as_completed(futs):
                source = futs[fut]
                run = fut.result()
                if not run.ok or not run.products:
                    failures.append(f"{source.id} ok={run.ok} products={len(run.products)} error={run.error}")

        if failures and not allow_errors:
            self.fail("Live fetch failures:\n" + "\n".join(failures))


if __name__ == "__main__":
    unittest.main()
