"""
Supplier aggregation tests
==========================

Verifies:
- Every cart line lands in exactly one group (no loss, no duplication).
- Subtotals are price x quantity summed per supplier.
- Group ids are ``<base>-<n>`` in first-seen supplier order.
- The legacy single-order flow keeps the bare base id.
"""
import unittest

from fakes import make_line

from supply_orders import config
from supply_orders.orders.aggregator import (
    build_legacy_group,
    generate_base_order_id,
    group_by_supplier,
)


class TestGenerateBaseOrderId(unittest.TestCase):
    def test_uses_prefix_and_millis(self):
        self.assertEqual(generate_base_order_id(1700000000123), "ORD-1700000000123")

    def test_defaults_to_now(self):
        base_id = generate_base_order_id()
        self.assertTrue(base_id.startswith(config.ORDER_ID_PREFIX))
        self.assertTrue(base_id[len(config.ORDER_ID_PREFIX):].isdigit())


class TestGroupBySupplier(unittest.TestCase):
    def test_two_supplier_example(self):
        lines = [
            make_line("a", price=100, quantity=2, supplier="X"),
            make_line("b", price=50, quantity=1, supplier="Y"),
            make_line("c", price=10, quantity=3, supplier="X"),
        ]
        groups = group_by_supplier(lines, "ORD-1")

        self.assertEqual(len(groups), 2)
        self.assertEqual(groups[0].supplier, "X")
        self.assertEqual(groups[0].subtotal, 230)
        self.assertEqual([l.product.id for l in groups[0].lines], ["a", "c"])
        self.assertEqual(groups[1].supplier, "Y")
        self.assertEqual(groups[1].subtotal, 50)
        self.assertEqual([g.order_id for g in groups], ["ORD-1-1", "ORD-1-2"])
        self.assertNotEqual(groups[0].order_id, groups[1].order_id)

    def test_partition_is_complete_and_disjoint(self):
        lines = [make_line(str(i), supplier=s) for i, s in enumerate("ABCABBAC")]
        groups = group_by_supplier(lines, "ORD-9")

        grouped_ids = [l.product.id for g in groups for l in g.lines]
        self.assertEqual(sorted(grouped_ids), sorted(l.product.id for l in lines))
        self.assertEqual(len(grouped_ids), len(set(grouped_ids)))
        for group in groups:
            self.assertTrue(all(l.product.supplier == group.supplier for l in group.lines))

    def test_first_seen_order(self):
        lines = [make_line("1", supplier="Z"), make_line("2", supplier="A"), make_line("3", supplier="Z")]
        groups = group_by_supplier(lines, "ORD-5")
        self.assertEqual([g.supplier for g in groups], ["Z", "A"])

    def test_supplier_match_is_exact(self):
        lines = [make_line("1", supplier="Acme"), make_line("2", supplier="acme ")]
        groups = group_by_supplier(lines, "ORD-5")
        self.assertEqual(len(groups), 2)

    def test_missing_supplier_uses_placeholder(self):
        groups = group_by_supplier([make_line("1", supplier="")], "ORD-5")
        self.assertEqual(groups[0].supplier, config.SUPPLIER_PLACEHOLDER)

    def test_empty_cart_gives_no_groups(self):
        self.assertEqual(group_by_supplier([], "ORD-5"), [])


class TestLegacyGroup(unittest.TestCase):
    def test_legacy_group_uses_base_id(self):
        lines = [make_line("1", price=10, quantity=2, supplier="X"),
                 make_line("2", price=5, supplier="Y")]
        group = build_legacy_group(lines, "ORD-7")
        self.assertEqual(group.order_id, "ORD-7")
        self.assertEqual(group.subtotal, 25)
        self.assertEqual(group.supplier, "X / Y")


if __name__ == "__main__":
    unittest.main()
