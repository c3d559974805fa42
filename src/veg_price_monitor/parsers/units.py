from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache


WEIGHT = "weight"
PACKAGE = "package"


@dataclass(frozen=True)
class UnitRule:
    token: str
    kind: str
    # Jin per unit. None means the token is a known packaging word without a weight estimate.
    multiplier: float | None

    @property
    def pattern(self) -> re.Pattern[str]:
        return _pattern_for(self.token)

    @property
    def label(self) -> str:
        return f"元/{self.token}"


@lru_cache(maxsize=None)
def _pattern_for(token: str) -> re.Pattern[str]:
    return re.compile(rf"(\d+(?:\.\d+)?)\s*{re.escape(token)}")


# Order matters: "kg" must be tried before "g", and "千克" before "克".
UNIT_RULES: tuple[UnitRule, ...] = (
    UnitRule("斤", WEIGHT, 1.0),
    UnitRule("kg", WEIGHT, 2.0),
    UnitRule("千克", WEIGHT, 2.0),
    UnitRule("g", WEIGHT, 0.002),
    UnitRule("克", WEIGHT, 0.002),
    UnitRule("两", WEIGHT, 0.1),
    UnitRule("磅", WEIGHT, 0.907),
    UnitRule("盒", PACKAGE, 0.5),
    UnitRule("袋", PACKAGE, 1.0),
    UnitRule("包", PACKAGE, 1.0),
    UnitRule("筐", PACKAGE, None),
    UnitRule("箱", PACKAGE, None),
    UnitRule("个", PACKAGE, 0.2),
    UnitRule("只", PACKAGE, 0.3),
    UnitRule("束", PACKAGE, 0.5),
    UnitRule("把", PACKAGE, 0.3),
    UnitRule("根", PACKAGE, 0.1),
)

WEIGHT_RULES: tuple[UnitRule, ...] = tuple(r for r in UNIT_RULES if r.kind == WEIGHT)
PACKAGE_RULES: tuple[UnitRule, ...] = tuple(r for r in UNIT_RULES if r.kind == PACKAGE)

WEIGHT_TOKENS: tuple[str, ...] = tuple(r.token for r in WEIGHT_RULES)
PACKAGE_TOKENS: tuple[str, ...] = tuple(r.token for r in PACKAGE_RULES)

PER_JIN_UNIT = "元/斤"
PER_PORTION_UNIT = "元/份"
PER_ITEM_UNIT = "元/个"
