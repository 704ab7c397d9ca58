"""
Cart session tests.
"""
import unittest

from fakes import make_product

from supply_orders.orders.cart import CartSession


class TestCartSession(unittest.TestCase):
    def setUp(self):
        self.cart = CartSession()
        self.gloves = make_product("1", "Gloves", price=100)
        self.tape = make_product("2", "Tape", price=30, supplier="Y")

    def test_add_increments_existing_line(self):
        self.cart.add(self.gloves)
        self.cart.add(self.gloves, 2)
        self.assertEqual(len(self.cart.lines), 1)
        self.assertEqual(self.cart.lines[0].quantity, 3)

    def test_add_rejects_zero_quantity(self):
        with self.assertRaises(ValueError):
            self.cart.add(self.gloves, 0)

    def test_totals(self):
        self.cart.add(self.gloves, 2)
        self.cart.add(self.tape, 3)
        self.assertEqual(self.cart.total_amount, 290)
        self.assertEqual(self.cart.total_items, 5)

    def test_update_quantity_clamps_and_removes(self):
        self.cart.add(self.gloves, 2)
        line = self.cart.update_quantity("1", -1)
        self.assertEqual(line.quantity, 1)
        self.assertIsNone(self.cart.update_quantity("1", -5))
        self.assertTrue(self.cart.is_empty)

    def test_update_unknown_product(self):
        self.assertIsNone(self.cart.update_quantity("missing", 1))

    def test_urgency(self):
        self.cart.add(self.gloves)
        self.assertTrue(self.cart.toggle_urgency("1").urgent)
        self.assertFalse(self.cart.toggle_urgency("1").urgent)
        self.assertTrue(self.cart.set_urgency("1", True).urgent)

    def test_remove_and_clear(self):
        self.cart.add(self.gloves)
        self.cart.add(self.tape)
        self.assertTrue(self.cart.remove("1"))
        self.assertFalse(self.cart.remove("1"))
        self.cart.clear()
        self.assertTrue(self.cart.is_empty)

    def test_to_dict(self):
        self.cart.add(self.gloves, 2)
        data = self.cart.to_dict()
        self.assertEqual(data["cart_id"], self.cart.cart_id)
        self.assertEqual(data["total_items"], 2)
        self.assertFalse(data["in_flight"])
        self.assertIsNone(data["requester"])


if __name__ == "__main__":
    unittest.main()
