"""
Cart Session Management
Holds one requester's cart between catalog browsing and submission
"""
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from supply_orders.models import CartLine, Employee, Product


class CartSession:
    """In-memory cart owned by one browser session; nothing is persisted."""

    def __init__(self, cart_id: str = None):
        self.cart_id = cart_id or uuid.uuid4().hex
        self.lines: List[CartLine] = []
        self.requester: Optional[Employee] = None
        self.created_at = datetime.now()
        # Set while a submission is running so a double click cannot submit twice
        self.in_flight = False
        self.last_order_ids: List[str] = []

    def _find(self, product_id: str) -> Optional[CartLine]:
        for line in self.lines:
            if line.product.id == product_id:
                return line
        return None

    def add(self, product: Product, quantity: int = 1) -> CartLine:
        """Add a product, or increase its quantity if already in the cart."""
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")
        line = self._find(product.id)
        if line:
            line.quantity += quantity
            return line
        line = CartLine(product=product, quantity=quantity)
        self.lines.append(line)
        return line

    def remove(self, product_id: str) -> bool:
        before = len(self.lines)
        self.lines = [line for line in self.lines if line.product.id != product_id]
        return len(self.lines) != before

    def update_quantity(self, product_id: str, delta: int) -> Optional[CartLine]:
        """
        Change a line's quantity by ``delta``.

        The quantity never drops below zero; a line that reaches zero is
        removed and None is returned.
        """
        line = self._find(product_id)
        if line is None:
            return None
        line.quantity = max(0, line.quantity + delta)
        if line.quantity == 0:
            self.remove(product_id)
            return None
        return line

    def toggle_urgency(self, product_id: str) -> Optional[CartLine]:
        line = self._find(product_id)
        if line:
            line.urgent = not line.urgent
        return line

    def set_urgency(self, product_id: str, urgent: bool) -> Optional[CartLine]:
        line = self._find(product_id)
        if line:
            line.urgent = bool(urgent)
        return line

    def clear(self):
        self.lines = []

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_amount(self) -> float:
        return sum(line.product.price * line.quantity for line in self.lines)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    def to_dict(self) -> Dict:
        return {
            'cart_id': self.cart_id,
            'lines': [line.to_dict() for line in self.lines],
            'requester': self.requester.to_dict() if self.requester else None,
            'total_amount': self.total_amount,
            'total_items': self.total_items,
            'in_flight': self.in_flight,
            'last_order_ids': self.last_order_ids,
        }
