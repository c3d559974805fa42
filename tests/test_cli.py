from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from veg_price_monitor import cli
from veg_price_monitor.config import ConfigError, default_config
from veg_price_monitor.models import Category, Product


CATEGORIES = [
    Category(
        id="root-vegetable",
        name="根茎类",
        products=[
            Product(id="/goods/9", name="土豆", price=5.0, spec="5斤", price_per_jin=1.0, is_packaged=False, unit="元/斤"),
        ],
    ),
    Category(id="mushroom", name="菌菇类", products=[]),
]


class TestCli(unittest.TestCase):
    def test_test_mode_prints_report(self) -> None:
        buf = io.StringIO()
        with redirect_stdout(buf):
            code = cli.main(["test"])
        self.assertEqual(code, 0)
        self.assertTrue(json.loads(buf.getvalue())["passed"])

    def test_normal_mode_prints_and_writes_html(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "site" / "index.html"
            buf = io.StringIO()
            with mock.patch.object(cli, "get_config", return_value=default_config()), mock.patch.object(
                cli, "fetch_all_categories", return_value=CATEGORIES
            ), redirect_stdout(buf):
                code = cli.main(["normal", "--output", str(out)])

            self.assertEqual(code, 0)
            text = buf.getvalue()
            self.assertIn("=== 1 products ===", text)
            self.assertIn("土豆 | 5.00元 | spec=5斤 | weight 1.00元/斤 | /goods/9", text)
            page = out.read_text(encoding="utf-8")
            self.assertIn("土豆", page)
            self.assertIn("暂无商品", page)

    def test_json_output(self) -> None:
        buf = io.StringIO()
        with mock.patch.object(cli, "get_config", return_value=default_config()), mock.patch.object(
            cli, "fetch_all_categories", return_value=CATEGORIES
        ), redirect_stdout(buf):
            code = cli.main(["--json"])

        self.assertEqual(code, 0)
        payload = json.loads(buf.getvalue().split("\n", 1)[1])
        self.assertEqual([c["id"] for c in payload], ["root-vegetable", "mushroom"])
        self.assertEqual(payload[0]["products"][0]["price_per_jin"], 1.0)

    def test_config_error_exit_code(self) -> None:
        with mock.patch.object(cli, "get_config", side_effect=ConfigError("invalid timeout")), redirect_stdout(io.StringIO()):
            self.assertEqual(cli.main(["normal"]), 2)


if __name__ == "__main__":
    unittest.main()
