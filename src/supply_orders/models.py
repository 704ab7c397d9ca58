"""
Supply Order Data Models

Pure definitions -- no side effects, no imports of external services.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class RowStatus(Enum):
    """Status of a single ledger row. Only ever moves PENDING -> RECEIVED."""
    PENDING = 'Pending'
    RECEIVED = 'Received'


class AggregateStatus(Enum):
    """Status of an order id, derived from its rows on every read."""
    PENDING = 'Pending'
    PARTIAL = 'Partial'
    RECEIVED = 'Received'


@dataclass(frozen=True)
class Product:
    """A catalog entry as read from the Products tab."""
    id: str
    name: str
    category: str
    price: float
    unit: str
    supplier: str
    image: str = ""
    stock_status: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'price': self.price,
            'unit': self.unit,
            'supplier': self.supplier,
            'image': self.image,
            'stock_status': self.stock_status,
        }


@dataclass(frozen=True)
class Employee:
    """An orderer from the EmpList tab."""
    code: str
    name: str
    factory: str = ""
    code_name: str = ""

    @property
    def label(self) -> str:
        """Display label written to the ledger and the order document."""
        return self.code_name or f"{self.code} {self.name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'name': self.name,
            'factory': self.factory,
            'code_name': self.code_name,
            'label': self.label,
        }


@dataclass
class CartLine:
    """One product in a cart session."""
    product: Product
    quantity: int = 1
    urgent: bool = False

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product': self.product.to_dict(),
            'quantity': self.quantity,
            'urgent': self.urgent,
            'line_total': self.line_total,
        }


@dataclass
class OrderGroup:
    """Cart lines destined for one supplier within one submission."""
    order_id: str
    supplier: str
    lines: List[CartLine] = field(default_factory=list)
    subtotal: float = 0.0

    @property
    def item_count(self) -> int:
        return len(self.lines)


@dataclass
class LedgerRow:
    """Represents a single row in the Orders tab."""
    order_id: str
    date: str
    orderer: str
    supplier: str
    product_name: str
    quantity: int
    unit: str
    urgent: bool = False
    status: RowStatus = RowStatus.PENDING
    received_qty: str = ''
    received_date: str = ''
    row_number: int = 0  # 1-based row in the sheet, 0 when not read from a sheet

    def to_row(self) -> List[str]:
        """Convert to a list matching ORDERS_COLUMNS order."""
        return [
            self.order_id,
            self.date,
            self.orderer,
            self.supplier,
            self.product_name,
            str(self.quantity),
            self.unit,
            'TRUE' if self.urgent else 'FALSE',
            self.status.value,
            self.received_qty,
            self.received_date,
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'order_id': self.order_id,
            'date': self.date,
            'orderer': self.orderer,
            'supplier': self.supplier,
            'product_name': self.product_name,
            'quantity': self.quantity,
            'unit': self.unit,
            'urgent': self.urgent,
            'status': self.status.value,
            'received_qty': self.received_qty,
            'received_date': self.received_date,
        }


@dataclass
class LedgerGroup:
    """Ledger rows sharing one order id, as shown in history and receiving."""
    order_id: str
    date: str
    supplier: str
    orderer: str
    rows: List[LedgerRow] = field(default_factory=list)
    status: Optional[AggregateStatus] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'order_id': self.order_id,
            'date': self.date,
            'supplier': self.supplier,
            'orderer': self.orderer,
            'status': self.status.value if self.status else None,
            'items': [row.to_dict() for row in self.rows],
        }


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------

@dataclass
class SheetResult:
    """Tagged outcome of a workbook call: never raised, always returned."""
    success: bool
    data: Any = None
    message: str = ''
    error_type: str = ''  # 'transport', 'not_found', 'nothing_changed', 'validation'


@dataclass
class ReceiveResult:
    """Outcome of a receive action on one order id."""
    success: bool
    order_id: str
    changed: int = 0
    found: bool = False
    message: str = ''
    error_type: str = ''  # 'not_found', 'nothing_changed', 'transport'
    product_names: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'order_id': self.order_id,
            'changed': self.changed,
            'found': self.found,
            'message': self.message,
            'error_type': self.error_type,
            'product_names': self.product_names,
        }


@dataclass
class GroupSubmission:
    """Per-group outcome inside a submission."""
    order_id: str
    supplier: str
    subtotal: float
    item_count: int
    rows_written: int = 0
    notified: bool = False
    pdf_path: Optional[str] = None
    qr_path: Optional[str] = None

    @property
    def fully_written(self) -> bool:
        return self.rows_written == self.item_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            'order_id': self.order_id,
            'supplier': self.supplier,
            'subtotal': self.subtotal,
            'item_count': self.item_count,
            'rows_written': self.rows_written,
            'notified': self.notified,
            'pdf_available': self.pdf_path is not None,
            'qr_available': self.qr_path is not None,
        }


@dataclass
class SubmitResult:
    """Outcome of submitting a cart."""
    success: bool
    message: str = ''
    error_type: str = ''  # 'validation', 'render', 'transport', 'partial_append', 'in_flight'
    base_id: str = ''
    groups: List[GroupSubmission] = field(default_factory=list)

    @property
    def order_ids(self) -> List[str]:
        return [g.order_id for g in self.groups]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'message': self.message,
            'error_type': self.error_type,
            'base_id': self.base_id,
            'order_ids': self.order_ids,
            'groups': [g.to_dict() for g in self.groups],
        }
