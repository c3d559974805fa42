from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..models import Product
from .common import calculate_price_per_jin, is_packaged, packaged_unit, parse_price
from .extractors import attr_value, extract_id, extract_name, extract_price_text, extract_spec, iter_elements
from .units import PER_JIN_UNIT


DEFAULT_CONTAINER_TAG = "div"
DEFAULT_CONTAINER_CLASS = "index_picAD"


class ListingParseError(Exception):
    pass


class ContainerNotFoundError(ListingParseError):
    def __init__(self, tag: str, class_marker: str) -> None:
        super().__init__(f"product container <{tag} class*={class_marker!r}> not found")
        self.tag = tag
        self.class_marker = class_marker


def find_container(root: Tag, tag: str, class_marker: str) -> Tag | None:
    for node in iter_elements(root):
        if node.name != tag:
            continue
        classes = attr_value(node, "class")
        if classes is not None and class_marker in classes:
            return node
    return None


def iter_product_nodes(container: Tag) -> Iterator[Tag]:
    for child in container.children:
        if isinstance(child, Tag):
            yield child


def build_product(node: Tag) -> Product:
    name = extract_name(node)
    price_text = extract_price_text(node)
    price = parse_price(price_text) if price_text else 0.0
    spec = extract_spec(node, name=name)

    packaged = is_packaged(spec)
    if packaged:
        price_per_jin = price
        unit = packaged_unit(spec)
    else:
        price_per_jin = calculate_price_per_jin(price, spec)
        unit = PER_JIN_UNIT

    return Product(
        id=extract_id(node),
        name=name,
        price=price,
        spec=spec,
        price_per_jin=price_per_jin,
        is_packaged=packaged,
        unit=unit,
    )


def has_content(product: Product) -> bool:
    return bool(product.name) or product.price > 0


@dataclass(frozen=True)
class ListingParserConfig:
    container_tag: str = DEFAULT_CONTAINER_TAG
    container_class: str = DEFAULT_CONTAINER_CLASS


class ListingParser:
    """
    Category pages render every product as a direct child of a single container
    (``div.index_picAD`` on the store's mobile site). Children that yield neither a
    name nor a price are layout wrappers and are skipped.
    """

    def __init__(self, cfg: ListingParserConfig | None = None) -> None:
        self._cfg = cfg or ListingParserConfig()

    @property
    def config(self) -> ListingParserConfig:
        return self._cfg

    def soup(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html or "", "lxml")

    def find_container(self, root: Tag) -> Tag | None:
        return find_container(root, self._cfg.container_tag, self._cfg.container_class)

    def parse(self, html: str) -> list[Product]:
        return self.parse_soup(self.soup(html))

    def parse_soup(self, root: Tag) -> list[Product]:
        container = self.find_container(root)
        if container is None:
            raise ContainerNotFoundError(self._cfg.container_tag, self._cfg.container_class)

        products: list[Product] = []
        for node in iter_product_nodes(container):
            product = build_product(node)
            if has_content(product):
                products.append(product)
        return products
