"""
Product catalog normalisation.

Turns raw Products-tab records (keyed by whatever headers the sheet has
today) into ``Product`` objects, and validates the admin register/update
form before it reaches the sheet.
"""
import re
from typing import Any, Dict, List, Optional

from supply_orders import config
from supply_orders.exceptions import ValidationFailure
from supply_orders.models import Product
from supply_orders.utils.header_lookup import get_value

_DRIVE_PATH_ID = re.compile(r'/d/(.+?)(/|$)')
_DRIVE_QUERY_ID = re.compile(r'[?&]id=([^&]+)')


def format_drive_image_url(url: Any) -> str:
    """
    Rewrite a Google Drive share link into a direct image URL.

    Anything that is not a Drive link is returned trimmed and unchanged.
    """
    if not url or not isinstance(url, str):
        return ''
    clean_url = url.strip()
    if not clean_url:
        return ''

    if 'drive.google.com' in clean_url:
        match = _DRIVE_PATH_ID.search(clean_url) or _DRIVE_QUERY_ID.search(clean_url)
        if match:
            return f"https://lh3.googleusercontent.com/d/{match.group(1)}"
    return clean_url


def _to_price(value: Any) -> float:
    try:
        price = float(str(value).replace(',', '').strip() or 0)
    except (TypeError, ValueError):
        return 0.0
    return price


def normalize_product(record: Dict[str, Any]) -> Product:
    """Build a Product from one sheet record, filling defaults for blanks."""
    aliases = config.PRODUCT_FIELD_ALIASES

    unit = get_value(record, aliases['unit'])
    # A bare "1" in the unit column is a data-entry artefact
    if not unit or str(unit) == '1':
        unit = config.DEFAULT_UNIT

    return Product(
        id=str(get_value(record, aliases['id']) or ''),
        name=str(get_value(record, aliases['name']) or config.DEFAULT_PRODUCT_NAME),
        category=str(get_value(record, aliases['category']) or config.DEFAULT_CATEGORY),
        price=_to_price(get_value(record, aliases['price'], 0)),
        unit=str(unit),
        supplier=str(get_value(record, aliases['supplier']) or config.SUPPLIER_PLACEHOLDER),
        image=format_drive_image_url(get_value(record, aliases['image'])),
        stock_status=str(get_value(record, aliases['stock_status']) or config.DEFAULT_STOCK_STATUS),
    )


def normalize_products(records: List[Dict[str, Any]]) -> List[Product]:
    return [normalize_product(r) for r in records]


def find_product(products: List[Product], product_id: str) -> Optional[Product]:
    for product in products:
        if product.id == str(product_id):
            return product
    return None


def list_suppliers(products: List[Product]) -> List[str]:
    """Distinct supplier names, sorted, for the admin form's autocomplete."""
    return sorted({p.supplier for p in products if p.supplier})


def validate_product_form(form: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check an admin register/update form and return the cleaned values.

    Raises:
        ValidationFailure: name, price or supplier missing, or price invalid.
    """
    name = str(form.get('name') or '').strip()
    supplier = str(form.get('supplier') or '').strip()
    raw_price = form.get('price')

    if not name or raw_price in (None, '') or not supplier:
        raise ValidationFailure("Product name, price and supplier are required")

    try:
        price = float(raw_price)
    except (TypeError, ValueError):
        raise ValidationFailure(f"Invalid price: {raw_price!r}")
    if price < 0:
        raise ValidationFailure("Price must not be negative")

    return {
        'name': name,
        'category': str(form.get('category') or config.DEFAULT_CATEGORY).strip(),
        'price': price,
        'unit': str(form.get('unit') or config.DEFAULT_UNIT).strip(),
        'stock_status': str(form.get('stock_status') or config.DEFAULT_STOCK_STATUS).strip(),
        'supplier': supplier,
        'image': str(form.get('image') or '').strip(),
    }


def next_product_id(products: List[Product]) -> str:
    """Next id for a newly registered product: highest numeric id + 1."""
    numeric_ids = [int(p.id) for p in products if p.id.isdigit()]
    if numeric_ids:
        return str(max(numeric_ids) + 1)
    return str(len(products) + 1)
