from __future__ import annotations

from typing import Any

from bs4.element import Tag

from .http_client import HttpClient
from .parsers.extractors import attr_value, element_text, iter_elements
from .parsers.listing import ListingParser, build_product, iter_product_nodes


SAMPLE_LIMIT = 3
SIMILAR_CLASS_KEYWORD = "pic"


def find_similar_classes(root: Tag, keyword: str = SIMILAR_CLASS_KEYWORD) -> list[dict[str, str]]:
    found: list[dict[str, str]] = []
    kw = keyword.lower()
    for node in iter_elements(root):
        classes = attr_value(node, "class")
        if classes and kw in classes.lower():
            found.append({"tag": node.name, "class": classes})
    return found


def _describe_node(node: Tag) -> dict[str, Any]:
    product = build_product(node)
    return {
        "tag": node.name,
        "attrs": {k: attr_value(node, k) for k in node.attrs},
        "product": product.to_dict(),
        "raw_text": element_text(node),
    }


def inspect_page(html: str, *, parser: ListingParser | None = None, sample_limit: int = SAMPLE_LIMIT) -> dict[str, Any]:
    """Summarise how a category page parses, for troubleshooting markup changes."""
    parser = parser or ListingParser()
    soup = parser.soup(html)
    result: dict[str, Any] = {"html_length": len(html or "")}

    container = parser.find_container(soup)
    if container is None:
        result["container_found"] = False
        result["similar_classes"] = find_similar_classes(soup)
        return result

    nodes = list(iter_product_nodes(container))
    result["container_found"] = True
    result["product_count"] = len(nodes)
    result["samples"] = [_describe_node(n) for n in nodes[:sample_limit]]
    return result


def debug_url(client: HttpClient, url: str, *, parser: ListingParser | None = None) -> dict[str, Any]:
    result: dict[str, Any] = {"mode": "debug", "url": url, "message": "debug finished"}
    if not url:
        result["status"] = "failed"
        result["error"] = "missing url"
        return result

    fetch = client.fetch_text(url)
    if not fetch.ok or fetch.text is None:
        result["status"] = "failed"
        result["error"] = fetch.error or "fetch failed"
        return result

    result["status"] = "success"
    result.update(inspect_page(fetch.text, parser=parser))
    return result
