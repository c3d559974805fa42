from __future__ import annotations

import html
from typing import Any

from .models import Category, Product
from .timeutil import format_local, utc_now_iso


UNKNOWN_PER_JIN = "无法计算"


def _h(s: Any) -> str:
    return html.escape("" if s is None else str(s), quote=True)


def format_money(value: float) -> str:
    return f"{value:.2f}"


def unit_price_text(product: Product) -> str:
    if not product.is_packaged and product.price_per_jin <= 0:
        return UNKNOWN_PER_JIN
    return f"{format_money(product.price_per_jin)}{product.unit}"


def _product_row(product: Product) -> str:
    name = _h(product.name) or "&nbsp;"
    kind = '<span class="tag tag-pack">包装</span>' if product.is_packaged else '<span class="tag tag-weight">称重</span>'
    unit_cls = "unit" if product.price_per_jin > 0 or product.is_packaged else "unit muted"
    return (
        "<tr>"
        f'<td class="name" data-k="商品">{name}{kind}</td>'
        f'<td data-k="规格">{_h(product.spec)}</td>'
        f'<td class="num" data-k="价格">{format_money(product.price)}元</td>'
        f'<td class="num {unit_cls}" data-k="单价">{_h(unit_price_text(product))}</td>'
        "</tr>"
    )


def _category_section(category: Category) -> str:
    if category.products:
        rows = "\n".join(_product_row(p) for p in category.products)
        body = f"""<table>
        <thead><tr><th>商品</th><th>规格</th><th>价格</th><th>单价</th></tr></thead>
        <tbody>
{rows}
        </tbody>
      </table>"""
    else:
        body = '<div class="empty">暂无商品</div>'
    return f"""<section class="category" id="{_h(category.id)}">
      <h2>{_h(category.name)} <span class="count">{len(category.products)}</span></h2>
      {body}
    </section>"""


def render_product_list_html(categories: list[Category], *, updated_at: str | None = None) -> str:
    updated = format_local(updated_at or utc_now_iso())
    total = sum(len(c.products) for c in categories)
    nav = " ".join(f'<a href="#{_h(c.id)}">{_h(c.name)} ({len(c.products)})</a>' for c in categories)
    sections = "\n    ".join(_category_section(c) for c in categories)

    return f"""<!doctype html>
<html lang="zh-CN">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>蔬菜价格</title>
  <style>
    :root {{
      --bg: #f7f7f5;
      --surface: #ffffff;
      --line: #e4e4e7;
      --txt: #18181b;
      --muted: #71717a;
      --accent: #16a34a;
      --pack: #d97706;
    }}
    * {{ box-sizing: border-box; }}
    body {{ margin: 0; font: 14px/1.5 "PingFang SC", "Microsoft YaHei", sans-serif; background: var(--bg); color: var(--txt); }}
    .wrap {{ max-width: 960px; margin: 0 auto; padding: 16px; }}
    header h1 {{ margin: 0; font-size: 22px; }}
    .sub {{ color: var(--muted); margin-top: 4px; }}
    nav {{ margin: 16px 0; display: flex; flex-wrap: wrap; gap: 8px; }}
    nav a {{ border: 1px solid var(--line); border-radius: 9999px; padding: 4px 12px; color: var(--txt); text-decoration: none; background: var(--surface); }}
    .category {{ background: var(--surface); border: 1px solid var(--line); border-radius: 12px; margin-bottom: 16px; overflow: hidden; }}
    .category h2 {{ margin: 0; padding: 12px 16px; font-size: 17px; border-bottom: 1px solid var(--line); }}
    .count {{ color: var(--muted); font-weight: 400; font-size: 13px; }}
    table {{ width: 100%; border-collapse: collapse; }}
    th, td {{ padding: 8px 16px; border-bottom: 1px solid var(--line); text-align: left; }}
    th {{ color: var(--muted); font-size: 12px; font-weight: 600; }}
    tr:last-child td {{ border-bottom: none; }}
    .num {{ white-space: nowrap; }}
    .unit {{ color: var(--accent); font-weight: 600; }}
    .muted {{ color: var(--muted); font-weight: 400; }}
    .tag {{ display: inline-block; margin-left: 6px; border-radius: 4px; padding: 0 6px; font-size: 11px; }}
    .tag-pack {{ color: var(--pack); border: 1px solid var(--pack); }}
    .tag-weight {{ color: var(--accent); border: 1px solid var(--accent); }}
    .empty {{ padding: 24px; text-align: center; color: var(--muted); }}
    @media (max-width: 640px) {{
      thead {{ display: none; }}
      table, tbody, tr, td {{ display: block; width: 100%; }}
      td {{ display: flex; justify-content: space-between; }}
      td[data-k]::before {{ content: attr(data-k); color: var(--muted); }}
    }}
  </style>
</head>
<body>
  <div class="wrap">
    <header>
      <h1>蔬菜价格</h1>
      <div class="sub">更新时间: <b>{_h(updated)}</b> | 共 <b>{total}</b> 个商品</div>
    </header>
    <nav>{nav}</nav>
    {sections}
  </div>
</body>
</html>
"""
