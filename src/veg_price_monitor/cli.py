from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .aggregator import fetch_all_categories, make_client
from .config import DEFAULT_CONFIG_PATH, ConfigError, get_config
from .debug import debug_url
from .models import Category
from .render import format_money, render_product_list_html, unit_price_text
from .selfcheck import run_self_check


def _print_categories(categories: list[Category]) -> None:
    total = sum(len(c.products) for c in categories)
    if total == 0:
        print("\nNo products found", flush=True)
        return
    print(f"\n=== {total} products ===", flush=True)
    for category in categories:
        print(f"\n## {category.name} ({category.id}) products={len(category.products)}", flush=True)
        for i, p in enumerate(category.products, start=1):
            kind = "package" if p.is_packaged else "weight"
            print(
                f"{i:>3}. {p.name or '-'} | {format_money(p.price)}元 | spec={p.spec or '-'} | "
                f"{kind} {unit_price_text(p)} | {p.id or '-'}",
                flush=True,
            )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="veg-price-monitor")
    parser.add_argument(
        "mode",
        nargs="?",
        default="normal",
        choices=["normal", "debug", "test"],
        help="normal: fetch all categories; debug: inspect the first category page; test: run the self-check.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--output", default="", help="Write the rendered HTML page to this path.")
    parser.add_argument("--json", action="store_true", help="Print results as JSON.")
    args = parser.parse_args(argv)

    if args.mode == "test":
        report = run_self_check()
        print(json.dumps(report, ensure_ascii=False, indent=2), flush=True)
        return 0 if report["passed"] else 1

    try:
        cfg = get_config(args.config)
    except ConfigError as e:
        print(f"[config] {e}", file=sys.stderr, flush=True)
        return 2
    print(f"[config] timeout={cfg.timeout}s retry_count={cfg.retry_count}", flush=True)

    if args.mode == "debug":
        report = debug_url(make_client(cfg), cfg.url_fv)
        print(json.dumps(report, ensure_ascii=False, indent=2), flush=True)
        return 0 if report.get("status") == "success" and report.get("container_found") else 1

    categories = fetch_all_categories(cfg)
    if args.json:
        print(json.dumps([c.to_dict() for c in categories], ensure_ascii=False, indent=2), flush=True)
    else:
        _print_categories(categories)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(render_product_list_html(categories), encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
