"""
Catalog tests
=============

Verifies:
- Products and employees normalise from aliased headers with defaults.
- Drive share links become direct image URLs.
- Register assigns max id + 1 and writes through the sheet's own headers.
- Update writes changed cells only and audits each change in ProductHistory.
"""
import unittest
from datetime import datetime

from fakes import FakeSpreadsheet

from supply_orders import config
from supply_orders.catalog.employees import find_employee, normalize_employees
from supply_orders.catalog.products import (
    format_drive_image_url,
    next_product_id,
    normalize_product,
    validate_product_form,
)
from supply_orders.exceptions import ValidationFailure
from supply_orders.sheets.catalog_sheets import CatalogSheets


class TestProducts(unittest.TestCase):
    def test_normalize_with_japanese_headers_and_defaults(self):
        product = normalize_product({
            "id": 7, "商品名": "軍手", "単価": "1,200", "単位": "1", "発注先": "",
        })
        self.assertEqual(product.id, "7")
        self.assertEqual(product.name, "軍手")
        self.assertEqual(product.price, 1200.0)
        self.assertEqual(product.unit, config.DEFAULT_UNIT)
        self.assertEqual(product.supplier, config.SUPPLIER_PLACEHOLDER)
        self.assertEqual(product.category, config.DEFAULT_CATEGORY)

    def test_bad_price_is_zero(self):
        self.assertEqual(normalize_product({"id": "1", "price": "n/a"}).price, 0.0)

    def test_drive_urls(self):
        self.assertEqual(
            format_drive_image_url("https://drive.google.com/file/d/abc123/view?usp=sharing"),
            "https://lh3.googleusercontent.com/d/abc123",
        )
        self.assertEqual(
            format_drive_image_url("https://drive.google.com/open?id=xyz"),
            "https://lh3.googleusercontent.com/d/xyz",
        )
        self.assertEqual(format_drive_image_url(" https://example.com/a.png "), "https://example.com/a.png")
        self.assertEqual(format_drive_image_url(None), "")

    def test_validate_form(self):
        with self.assertRaises(ValidationFailure):
            validate_product_form({"name": "A", "price": "", "supplier": "X"})
        with self.assertRaises(ValidationFailure):
            validate_product_form({"name": "A", "price": -1, "supplier": "X"})
        with self.assertRaises(ValidationFailure):
            validate_product_form({"name": "A", "price": "abc", "supplier": "X"})
        cleaned = validate_product_form({"name": " A ", "price": "0", "supplier": "X"})
        self.assertEqual(cleaned["name"], "A")
        self.assertEqual(cleaned["price"], 0.0)

    def test_next_product_id(self):
        products = [normalize_product({"id": i}) for i in ("3", "10", "x")]
        self.assertEqual(next_product_id(products), "11")
        self.assertEqual(next_product_id([normalize_product({"id": "x"})]), "2")


class TestEmployees(unittest.TestCase):
    def setUp(self):
        self.employees = normalize_employees([
            {"社員code": "E001", "氏名": "Tanaka", "工場": "Koga", "Code+Name": "E001 田中"},
            {"社員code": "", "氏名": "No code"},
            {"社員code": "E0011", "氏名": "Sato"},
        ])

    def test_rows_without_code_dropped(self):
        self.assertEqual([e.code for e in self.employees], ["E001", "E0011"])

    def test_lookup_requires_min_length(self):
        self.assertIsNone(find_employee(self.employees, "E0"))
        self.assertEqual(find_employee(self.employees, "E001").name, "Tanaka")
        self.assertEqual(find_employee(self.employees, "E0011").name, "Sato")
        self.assertIsNone(find_employee(self.employees, "E00"))

    def test_label(self):
        self.assertEqual(self.employees[0].label, "E001 田中")
        self.assertEqual(self.employees[1].label, "E0011 Sato")


class TestCatalogSheets(unittest.TestCase):
    def setUp(self):
        self.fake = FakeSpreadsheet()
        self.products_ws = self.fake.add_sheet(config.PRODUCTS_SHEET_NAME, [
            ["id", "商品名", "category", "単価", "unit", "stockStatus", "発注先", "image"],
            ["1", "Gloves", "Safety", "100", "pcs", "In Stock", "X", ""],
            ["5", "Tape", "Misc", "30", "roll", "In Stock", "Y", ""],
        ])
        self.fake.add_sheet(config.EMPLOYEES_SHEET_NAME, [
            ["社員code", "氏名", "工場"],
            ["E001", "Tanaka", "Koga"],
        ])
        self.catalog = CatalogSheets.from_spreadsheet(self.fake)

    def test_fetch(self):
        products = self.catalog.fetch_products().data
        self.assertEqual([p.name for p in products], ["Gloves", "Tape"])
        employees = self.catalog.fetch_employees().data
        self.assertEqual(employees[0].factory, "Koga")

    def test_register_product(self):
        result = self.catalog.register_product({"name": "Mask", "price": "250", "supplier": "Z"})
        self.assertTrue(result.success)
        self.assertEqual(result.data, "6")
        self.assertEqual(self.products_ws.rows[-1][:4], ["6", "Mask", config.DEFAULT_CATEGORY, "250"])
        self.assertEqual(self.products_ws.rows[-1][6], "Z")

    def test_register_validation(self):
        result = self.catalog.register_product({"name": "Mask"})
        self.assertFalse(result.success)
        self.assertEqual(result.error_type, "validation")
        self.assertEqual(len(self.products_ws.rows), 3)

    def test_update_product_writes_history(self):
        when = datetime(2025, 1, 2, 3, 4, 5)
        result = self.catalog.update_product("5", {
            "name": "Tape", "category": "Misc", "price": "35", "unit": "roll",
            "stock_status": "In Stock", "supplier": "Y2",
        }, updater="admin", when=when)

        self.assertTrue(result.success)
        self.assertEqual(sorted(result.data), ["price", "supplier"])
        self.assertEqual(self.products_ws.rows[2][3], "35")
        self.assertEqual(self.products_ws.rows[2][6], "Y2")

        history = self.fake.sheets[config.PRODUCT_HISTORY_SHEET_NAME].rows
        self.assertEqual(history[0], config.PRODUCT_HISTORY_COLUMNS)
        self.assertIn(["2025-01-02 03:04:05", "5", "price", "30", "35", "admin"], history)
        self.assertIn(["2025-01-02 03:04:05", "5", "supplier", "Y", "Y2", "admin"], history)

    def test_update_unknown_product(self):
        result = self.catalog.update_product("99", {"name": "A", "price": 1, "supplier": "X"})
        self.assertEqual(result.error_type, "not_found")

    def test_read_failure_is_transport(self):
        self.products_ws.fail_reads = True
        result = self.catalog.fetch_products()
        self.assertFalse(result.success)
        self.assertEqual(result.error_type, "transport")


if __name__ == "__main__":
    unittest.main()
