from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: float
    spec: str
    price_per_jin: float
    is_packaged: bool
    unit: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "spec": self.spec,
            "price_per_jin": self.price_per_jin,
            "is_packaged": self.is_packaged,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class CategorySource:
    id: str
    name: str
    config_key: str


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    products: list[Product] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "products": [p.to_dict() for p in self.products]}


@dataclass(frozen=True)
class CategoryRun:
    category: CategorySource
    ok: bool
    error: str | None
    duration_ms: int
    products: list[Product]
