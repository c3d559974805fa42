from __future__ import annotations

from .models import CategorySource


# Display order of the result set.
CATEGORY_SOURCES: tuple[CategorySource, ...] = (
    CategorySource(id="fruit-vegetable", name="瓜果花菜类", config_key="url_fv"),
    CategorySource(id="leaf-vegetable", name="叶菜类", config_key="url_lv"),
    CategorySource(id="root-vegetable", name="根茎类", config_key="url_rv"),
    CategorySource(id="mushroom", name="菌菇类", config_key="url_m"),
    CategorySource(id="condiment", name="调味菜", config_key="url_c"),
)
