from __future__ import annotations

from typing import Any

from .parsers.common import calculate_price_per_jin, clean_price_text, parse_weight_from_spec


TOLERANCE = 1e-6

WEIGHT_CASES: tuple[tuple[str, float], ...] = (
    ("500g", 1.0),
    ("1kg", 2.0),
    ("2斤", 2.0),
    ("500克", 1.0),
    ("1千克", 2.0),
    ("10两", 1.0),
    ("1磅", 0.907),
    ("", 0.0),
    ("无规格", 0.0),
)

PRICE_CASES: tuple[tuple[str, str], ...] = (
    ("¥12.50", "12.50"),
    ("$15.99", "15.99"),
    ("价格：8.80元", "8.80"),
    ("特价 5.5", "5.5"),
    ("免费", "0"),
    ("", "0"),
)

PER_JIN_CASES: tuple[tuple[float, str, float], ...] = (
    (10.0, "1斤", 10.0),
    (20.0, "2斤", 10.0),
    (15.0, "500g", 15.0),
    (0.0, "1斤", 0.0),
    (10.0, "", 0.0),
)


def _group(failures: list[dict[str, Any]], total: int) -> dict[str, Any]:
    return {"passed": not failures, "cases": total, "failures": failures}


def check_weight_parsing() -> dict[str, Any]:
    failures = []
    for spec, expected in WEIGHT_CASES:
        got = parse_weight_from_spec(spec)
        if abs(got - expected) > TOLERANCE:
            failures.append({"spec": spec, "expected": expected, "got": got})
    return _group(failures, len(WEIGHT_CASES))


def check_price_cleaning() -> dict[str, Any]:
    failures = []
    for text, expected in PRICE_CASES:
        got = clean_price_text(text)
        if got != expected:
            failures.append({"text": text, "expected": expected, "got": got})
    return _group(failures, len(PRICE_CASES))


def check_price_per_jin() -> dict[str, Any]:
    failures = []
    for price, spec, expected in PER_JIN_CASES:
        got = calculate_price_per_jin(price, spec)
        if abs(got - expected) > TOLERANCE:
            failures.append({"price": price, "spec": spec, "expected": expected, "got": got})
    return _group(failures, len(PER_JIN_CASES))


def run_self_check() -> dict[str, Any]:
    tests = {
        "weight_parsing": check_weight_parsing(),
        "price_cleaning": check_price_cleaning(),
        "price_calculation": check_price_per_jin(),
    }
    passed = all(t["passed"] for t in tests.values())
    return {
        "mode": "test",
        "message": "self-check passed" if passed else "self-check failed",
        "passed": passed,
        "tests": tests,
    }
