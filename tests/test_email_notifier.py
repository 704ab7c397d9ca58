"""
Order notification email tests (SMTP mocked).
"""
import os
import unittest
from unittest.mock import patch

from fakes import make_employee, make_line, temp_output_dir

from supply_orders.models import OrderGroup
from supply_orders.notifications.email_notifier import OrderNotifier, build_order_message


def _group():
    lines = [make_line("1", price=100, quantity=2, name="Gloves", urgent=True)]
    return OrderGroup(order_id="ORD-1-1", supplier="X", lines=lines, subtotal=200)


def _notifier(**overrides):
    settings = dict(host="smtp.example.com", port=587, username="orders@example.com",
                    password="secret", sender="orders@example.com",
                    recipients=["buyer@example.com"], use_tls=True, enabled=True)
    settings.update(overrides)
    return OrderNotifier(**settings)


class TestBuildMessage(unittest.TestCase):
    def test_subject_body_and_attachment(self):
        pdf_path = os.path.join(temp_output_dir("test_email"), "ORD-1-1.pdf")
        with open(pdf_path, "wb") as f:
            f.write(b"%PDF-1.4 test")

        msg = build_order_message(_group(), make_employee(), "orders@example.com",
                                  ["a@example.com", "b@example.com"], pdf_path)

        self.assertEqual(msg["Subject"], "[Order notice] New order (ORD-1-1)")
        self.assertEqual(msg["To"], "a@example.com, b@example.com")
        body = msg.get_body(preferencelist=("plain",)).get_content()
        self.assertIn("Order ID: ORD-1-1", body)
        self.assertIn("Gloves x 2 pcs ★", body)
        attachments = list(msg.iter_attachments())
        self.assertEqual(len(attachments), 1)
        self.assertEqual(attachments[0].get_filename(), "ORD-1-1.pdf")


class TestOrderNotifier(unittest.TestCase):
    @patch("supply_orders.notifications.email_notifier.smtplib.SMTP")
    def test_sends_with_tls_and_login(self, mock_smtp):
        sent = _notifier().notify_order(_group(), make_employee())

        self.assertTrue(sent)
        server = mock_smtp.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("orders@example.com", "secret")
        server.send_message.assert_called_once()
        server.quit.assert_called_once()

    @patch("supply_orders.notifications.email_notifier.smtplib.SMTP")
    def test_smtp_failure_returns_false(self, mock_smtp):
        mock_smtp.return_value.send_message.side_effect = OSError("connection reset")
        self.assertFalse(_notifier().notify_order(_group(), make_employee()))

    @patch("supply_orders.notifications.email_notifier.smtplib.SMTP")
    def test_disabled_or_unconfigured_skips_smtp(self, mock_smtp):
        self.assertFalse(_notifier(enabled=False).notify_order(_group(), make_employee()))
        self.assertFalse(_notifier(host="").notify_order(_group(), make_employee()))
        self.assertFalse(_notifier(recipients=[]).notify_order(_group(), make_employee()))
        mock_smtp.assert_not_called()


if __name__ == "__main__":
    unittest.main()
