from __future__ import annotations

import math
import re

from .units import (
    PACKAGE_RULES,
    PACKAGE_TOKENS,
    PER_ITEM_UNIT,
    PER_PORTION_UNIT,
    WEIGHT_RULES,
    WEIGHT_TOKENS,
)


_NUMBER_RE = re.compile(r"\d+\.\d+|\d+")
_HAS_DIGIT_RE = re.compile(r"\d+(\.\d+)?")

# Markers that make a free-floating text node look like a price.
PRICE_MARKERS = ("元", "￥", "$")
PREFERRED_PRICE_MARKER = "￥"


def has_digit(text: str) -> bool:
    return bool(_HAS_DIGIT_RE.search(text or ""))


def looks_like_price_text(text: str) -> bool:
    return any(m in text for m in PRICE_MARKERS) and has_digit(text)


def looks_like_weight_text(text: str) -> bool:
    return any(u in text for u in WEIGHT_TOKENS) and has_digit(text)


def clean_price_text(text: str) -> str:
    """Return the first number in ``text`` (decimals win over their integer part), or "0"."""
    m = _NUMBER_RE.search(text or "")
    if not m:
        return "0"
    return m.group(0)


def parse_price(text: str) -> float:
    try:
        value = float(clean_price_text(text))
    except ValueError:
        return 0.0
    if not math.isfinite(value) or value <= 0:
        return 0.0
    return value


def parse_weight_from_spec(spec: str) -> float:
    """Estimate the weight in jin described by ``spec``.

    Weight units are tried first, in table order. Packaging units fall back to a rough
    per-package estimate. Packaging words with no estimate never match. Returns 0 when
    nothing usable is found.
    """
    if not spec:
        return 0.0
    spec_l = spec.lower()

    for rule in WEIGHT_RULES:
        m = rule.pattern.search(spec_l)
        if m:
            try:
                return float(m.group(1)) * rule.multiplier
            except ValueError:
                continue

    for rule in PACKAGE_RULES:
        if rule.multiplier is None:
            continue
        m = rule.pattern.search(spec_l)
        if m:
            try:
                return float(m.group(1)) * rule.multiplier
            except ValueError:
                continue

    return 0.0


def spec_from_name(name: str) -> str:
    if not name:
        return ""

    # A packaging word in the name means the listing is a single package.
    for token in PACKAGE_TOKENS:
        if token in name:
            return f"1{token}"

    for rule in WEIGHT_RULES:
        if rule.token not in name:
            continue
        m = rule.pattern.search(name)
        if m:
            return m.group(0)

    return ""


def is_packaged(spec: str) -> bool:
    # No spec at all is priced per package rather than per weight.
    if not spec:
        return True
    return any(token in spec for token in PACKAGE_TOKENS)


def packaged_unit(spec: str) -> str:
    if not spec:
        return PER_PORTION_UNIT
    for rule in PACKAGE_RULES:
        if rule.token in spec:
            return rule.label
    return PER_ITEM_UNIT


def calculate_price_per_jin(price: float, spec: str) -> float:
    if price <= 0:
        return 0.0
    weight = parse_weight_from_spec(spec)
    if not math.isfinite(weight) or weight <= 0:
        return 0.0
    return price / weight
