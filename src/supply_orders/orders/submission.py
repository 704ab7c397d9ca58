"""
Cart Submission
===============

Turns a cart into submitted orders:

1. validate (non-empty cart, known requester)
2. split by supplier and assign order ids
3. render every group's order document and QR image; any failure stops
   here, before the ledger is touched, and removes what was rendered
4. append each group's rows to the ledger
5. email each fully written group (best-effort)

Step 4 is not atomic. If an append fails, later groups are not attempted
and the result lists which groups were fully written, partially written
and not written at all. Ledger rows are not rolled back; documents of
groups with no written rows are removed.
"""
from __future__ import annotations

import os
from datetime import datetime
from typing import Dict, List, Optional

from supply_orders.exceptions import RenderError
from supply_orders.models import Employee, GroupSubmission, OrderGroup, SubmitResult
from supply_orders.orders.aggregator import (
    build_legacy_group,
    generate_base_order_id,
    group_by_supplier,
)
from supply_orders.orders.cart import CartSession
from supply_orders.orders.pdf_generator import generate_order_pdf
from supply_orders.orders.qr_code import save_qr_svg
from supply_orders.utils.logger import get_logger


class OrderSubmissionService:
    """Submit carts against an order ledger and a notifier."""

    def __init__(self, ledger, notifier=None, output_dir: Optional[str] = None,
                 split_by_supplier: bool = True):
        """
        Args:
            ledger: Object with ``append_order_group(group, requester, when)``
                returning a SheetResult (OrderLedgerSheets in production).
            notifier: Object with ``notify_order(group, requester, pdf_path)``
                returning bool, or None to skip notification.
            output_dir: Where order PDFs are written. Defaults to ORDER_FOLDER.
            split_by_supplier: False reproduces the legacy single-order flow
                (whole cart under the bare base id).
        """
        self.ledger = ledger
        self.notifier = notifier
        self.output_dir = output_dir
        self.split_by_supplier = split_by_supplier

    def submit(self, cart: CartSession, requester: Optional[Employee] = None,
               when: Optional[datetime] = None) -> SubmitResult:
        if cart.in_flight:
            return SubmitResult(False, "This cart is already being submitted", 'in_flight')

        requester = requester or cart.requester
        if cart.is_empty:
            return SubmitResult(False, "Cart is empty", 'validation')
        if requester is None:
            return SubmitResult(False, "Requester is required", 'validation')

        cart.in_flight = True
        try:
            result = self._submit(cart, requester, when or datetime.now())
        finally:
            cart.in_flight = False

        if result.success:
            cart.last_order_ids = result.order_ids
            cart.clear()
        return result

    def _submit(self, cart: CartSession, requester: Employee, when: datetime) -> SubmitResult:
        logger = get_logger()
        base_id = generate_base_order_id(int(when.timestamp() * 1000))
        if self.split_by_supplier:
            groups = group_by_supplier(cart.lines, base_id)
        else:
            groups = [build_legacy_group(cart.lines, base_id)]

        logger.log_submission(base_id, requester.label, len(groups), len(cart.lines))

        documents: Dict[str, List[str]] = {g.order_id: [] for g in groups}
        try:
            for group in groups:
                documents[group.order_id].append(
                    generate_order_pdf(group, requester, when, output_dir=self.output_dir)
                )
                documents[group.order_id].append(
                    save_qr_svg(group, requester, when, output_dir=self.output_dir)
                )
        except RenderError as e:
            logger.error(f"Submission {base_id} aborted: {e}", component="Orders")
            for paths in documents.values():
                self._discard(paths)
            return SubmitResult(False, f"Could not create order document: {e}", 'render',
                                base_id=base_id)

        submissions = [
            GroupSubmission(
                order_id=g.order_id,
                supplier=g.supplier,
                subtotal=g.subtotal,
                item_count=g.item_count,
                pdf_path=documents[g.order_id][0],
                qr_path=documents[g.order_id][1],
            )
            for g in groups
        ]

        failure = None
        for group, submission in zip(groups, submissions):
            append = self.ledger.append_order_group(group, requester, when)
            submission.rows_written = append.data or 0
            if not append.success:
                failure = append
                break

        for submission in submissions:
            if not submission.rows_written:
                self._discard(documents[submission.order_id])
                submission.pdf_path = None
                submission.qr_path = None

        for group, submission in zip(groups, submissions):
            if submission.rows_written and submission.fully_written:
                submission.notified = self._notify(group, requester, submission.pdf_path)

        if failure is None:
            ids = ", ".join(s.order_id for s in submissions)
            return SubmitResult(True, f"Submitted {len(submissions)} order(s): {ids}",
                                base_id=base_id, groups=submissions)

        if not any(s.rows_written for s in submissions):
            return SubmitResult(False, failure.message or "Failed to write orders", 'transport',
                                base_id=base_id, groups=submissions)

        return SubmitResult(False, self._partial_message(submissions), 'partial_append',
                            base_id=base_id, groups=submissions)

    def _notify(self, group: OrderGroup, requester: Employee, pdf_path: Optional[str]) -> bool:
        if self.notifier is None:
            return False
        try:
            return bool(self.notifier.notify_order(group, requester, pdf_path))
        except Exception as e:
            get_logger().error(f"Order {group.order_id} - notifier raised: {e}", component="Notify")
            return False

    @staticmethod
    def _discard(paths: List[str]) -> None:
        """Remove order documents that no ledger row refers to."""
        for path in paths:
            try:
                os.remove(path)
            except OSError as e:
                get_logger().warning(f"Could not remove {path}: {e}", component="Orders")

    @staticmethod
    def _partial_message(submissions: List[GroupSubmission]) -> str:
        written = [s.order_id for s in submissions if s.fully_written]
        partial = [s.order_id for s in submissions if s.rows_written and not s.fully_written]
        missing = [s.order_id for s in submissions if not s.rows_written]
        return (
            "Orders were only partly saved. "
            f"Written: {', '.join(written) or '-'}; "
            f"incomplete: {', '.join(partial) or '-'}; "
            f"not written: {', '.join(missing) or '-'}"
        )
