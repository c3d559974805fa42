from __future__ import annotations

from typing import Callable, Iterable, Iterator

from bs4.element import NavigableString, PreformattedString, Tag

from .common import PREFERRED_PRICE_MARKER, looks_like_price_text, looks_like_weight_text, spec_from_name


Strategy = Callable[[Tag], str | None]

SPEC_STYLE_MARKER = "font-size:11px;"


def iter_elements(root: Tag) -> Iterator[Tag]:
    """Depth-first pre-order walk over ``root`` and its element descendants."""
    yield root
    for node in root.descendants:
        if isinstance(node, Tag):
            yield node


def iter_text_nodes(root: Tag) -> Iterator[str]:
    for node in root.descendants:
        if isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            yield str(node)


def attr_value(node: Tag, key: str) -> str | None:
    value = node.get(key)
    if value is None:
        return None
    # bs4 splits multi-valued attributes such as class into lists.
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)


def _matches(node: Tag, tag: str, attr: str | None, contains: str | None) -> bool:
    if node.name != tag:
        return False
    if not attr or not contains:
        return True
    value = attr_value(node, attr)
    return value is not None and contains in value


def find_element(root: Tag, tag: str, attr: str | None = None, contains: str | None = None) -> Tag | None:
    for node in iter_elements(root):
        if _matches(node, tag, attr, contains):
            return node
    return None


def element_text(node: Tag) -> str:
    return node.get_text().strip()


def extract_text(root: Tag, tag: str, attr: str | None = None, contains: str | None = None) -> str:
    node = find_element(root, tag, attr, contains)
    if node is None:
        return ""
    return element_text(node)


def extract_attr(root: Tag, tag: str, attr: str) -> str:
    for node in iter_elements(root):
        if node.name != tag:
            continue
        value = attr_value(node, attr)
        if value is not None:
            return value.strip()
    return ""


def text_of(tag: str, attr: str | None = None, contains: str | None = None) -> Strategy:
    def strategy(node: Tag) -> str | None:
        return extract_text(node, tag, attr, contains) or None

    return strategy


def first_match(node: Tag, strategies: Iterable[Strategy]) -> str:
    for strategy in strategies:
        value = strategy(node)
        if value:
            return value
    return ""


def find_price_text(root: Tag) -> str | None:
    candidates = [t.strip() for t in iter_text_nodes(root) if looks_like_price_text(t.strip())]
    for text in candidates:
        if PREFERRED_PRICE_MARKER in text:
            return text
    return candidates[0] if candidates else None


def find_spec_text(root: Tag) -> str | None:
    for raw in iter_text_nodes(root):
        text = raw.strip()
        if looks_like_weight_text(text):
            return text
    return None


NAME_STRATEGIES: tuple[Strategy, ...] = (
    text_of("h3"),
    text_of("h2"),
    text_of("h4"),
    text_of("span"),
    text_of("div"),
)

PRICE_STRATEGIES: tuple[Strategy, ...] = (
    text_of("span", "class", "price"),
    text_of("div", "class", "price"),
    find_price_text,
)

SPEC_STRATEGIES: tuple[Strategy, ...] = (
    text_of("span", "class", "spec"),
    text_of("div", "class", "spec"),
    text_of("span", "style", SPEC_STYLE_MARKER),
    find_spec_text,
)


def extract_id(node: Tag) -> str:
    return extract_attr(node, "a", "href")


def extract_name(node: Tag) -> str:
    return first_match(node, NAME_STRATEGIES)


def extract_price_text(node: Tag) -> str:
    return first_match(node, PRICE_STRATEGIES)


def extract_spec(node: Tag, *, name: str = "") -> str:
    spec = first_match(node, SPEC_STRATEGIES)
    if spec:
        return spec
    return spec_from_name(name)
