"""
Catalog tabs: Products, EmpList and the ProductHistory audit log.

Writes go through the headers actually present in the Products tab, so a
sheet with Japanese or reordered headers is filled in the right columns.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from supply_orders import config
from supply_orders.catalog.employees import normalize_employees
from supply_orders.catalog.products import (
    find_product,
    next_product_id,
    normalize_products,
    validate_product_form,
)
from supply_orders.exceptions import ValidationFailure
from supply_orders.models import SheetResult
from supply_orders.sheets.client import WorkbookTabs
from supply_orders.utils.header_lookup import find_column, normalize_header, rows_to_records
from supply_orders.utils.logger import get_logger

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def _logical_field(header: str) -> Optional[str]:
    """Which product field a sheet header holds, if any."""
    wanted = normalize_header(header)
    for field_name, aliases in config.PRODUCT_FIELD_ALIASES.items():
        if any(normalize_header(a) == wanted for a in aliases):
            return field_name
    return None


def _cell(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class CatalogSheets(WorkbookTabs):
    """Product and employee master data."""

    def _products(self):
        return self.get_or_create_sheet(config.PRODUCTS_SHEET_NAME, config.PRODUCTS_COLUMNS)

    def _employees(self):
        return self.spreadsheet.worksheet(config.EMPLOYEES_SHEET_NAME)

    def _history(self):
        return self.get_or_create_sheet(config.PRODUCT_HISTORY_SHEET_NAME,
                                        config.PRODUCT_HISTORY_COLUMNS)

    def fetch_products(self) -> SheetResult:
        try:
            values = self._products().get_all_values()
        except Exception as e:
            get_logger().error(f"Failed to read products: {e}", component="Catalog")
            return SheetResult(False, message=f"Failed to read products: {e}", error_type='transport')
        return SheetResult(True, data=normalize_products(rows_to_records(values)))

    def fetch_employees(self) -> SheetResult:
        try:
            values = self._employees().get_all_values()
        except Exception as e:
            get_logger().error(f"Failed to read employees: {e}", component="Catalog")
            return SheetResult(False, message=f"Failed to read employees: {e}", error_type='transport')
        return SheetResult(True, data=normalize_employees(rows_to_records(values)))

    def register_product(self, form: Dict[str, Any]) -> SheetResult:
        """
        Append a new product row. ``data`` is the new product id.

        The id is the highest numeric id in the tab plus one.
        """
        try:
            cleaned = validate_product_form(form)
        except ValidationFailure as e:
            return SheetResult(False, message=str(e), error_type='validation')

        try:
            ws = self._products()
            values = ws.get_all_values()
            headers = [str(h) for h in values[0]] if values else list(config.PRODUCTS_COLUMNS)
            products = normalize_products(rows_to_records(values))
            new_id = next_product_id(products)
            cleaned['id'] = new_id

            row = []
            for header in headers:
                field_name = _logical_field(header)
                row.append(_cell(cleaned.get(field_name, '')) if field_name else '')
            ws.append_row(row, value_input_option="USER_ENTERED")
        except Exception as e:
            get_logger().error(f"Failed to register product: {e}", component="Catalog")
            return SheetResult(False, message=f"Failed to register product: {e}", error_type='transport')

        get_logger().info(f"Registered product {new_id}: {cleaned['name']}", component="Catalog")
        return SheetResult(True, data=new_id, message=f"Product {new_id} registered")

    def update_product(self, product_id: str, form: Dict[str, Any],
                       updater: str = '', when: Optional[datetime] = None) -> SheetResult:
        """
        Overwrite a product's fields and record each change in ProductHistory.

        ``data`` is the list of changed field names. Unchanged fields are
        neither written nor audited.
        """
        try:
            cleaned = validate_product_form(form)
        except ValidationFailure as e:
            return SheetResult(False, message=str(e), error_type='validation')

        when = when or datetime.now()
        try:
            ws = self._products()
            values = ws.get_all_values()
            if not values:
                return SheetResult(False, message=f"Product {product_id} not found",
                                   error_type='not_found')
            headers = [str(h) for h in values[0]]
            products = normalize_products(rows_to_records(values))
            current = find_product(products, product_id)
            if current is None:
                return SheetResult(False, message=f"Product {product_id} not found",
                                   error_type='not_found')
            row_number = products.index(current) + 2

            changes = []
            old_values = current.to_dict()
            for field_name, new_value in cleaned.items():
                col = find_column(headers, config.PRODUCT_FIELD_ALIASES[field_name])
                if col is None:
                    continue
                old_value = old_values.get(field_name, '')
                if _cell(old_value) == _cell(new_value):
                    continue
                ws.update_cell(row_number, col, _cell(new_value))
                changes.append((field_name, _cell(old_value), _cell(new_value)))

            history = self._history() if changes else None
            for field_name, old_value, new_value in changes:
                history.append_row(
                    [when.strftime(TIMESTAMP_FORMAT), str(product_id), field_name,
                     old_value, new_value, updater],
                    value_input_option="USER_ENTERED",
                )
        except Exception as e:
            get_logger().error(f"Failed to update product {product_id}: {e}", component="Catalog")
            return SheetResult(False, message=f"Failed to update product: {e}", error_type='transport')

        get_logger().info(
            f"Updated product {product_id}: {len(changes)} field(s) by {updater or 'unknown'}",
            component="Catalog",
        )
        return SheetResult(True, data=[c[0] for c in changes],
                           message=f"Product {product_id} updated")
