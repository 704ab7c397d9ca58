"""
Order Notifier

Sends one notification email per submitted order group, with the order
document attached. Sending is best-effort: failures are logged and reported
as False, never raised, so a mail outage cannot undo a submitted order.
"""
import os
import smtplib
from email.message import EmailMessage
from typing import List, Optional

from supply_orders import config
from supply_orders.models import Employee, OrderGroup
from supply_orders.utils.logger import get_logger

SUBJECT_TEMPLATE = "[Order notice] New order ({order_id})"


def build_order_message(group: OrderGroup, requester: Employee, sender: str,
                        recipients: List[str], pdf_path: Optional[str] = None) -> EmailMessage:
    """Compose the notification email for one order group."""
    msg = EmailMessage()
    msg['Subject'] = SUBJECT_TEMPLATE.format(order_id=group.order_id)
    msg['From'] = sender
    msg['To'] = ', '.join(recipients)

    lines = [
        "A new order has been placed.",
        "",
        f"Order ID: {group.order_id}",
        f"Orderer: {requester.label}",
        f"Supplier: {group.supplier}",
        f"Total: {group.subtotal:,.0f}",
        "",
        "Items:",
    ]
    for line in group.lines:
        marker = f" {config.URGENT_MARKER}" if line.urgent else ""
        lines.append(f"  - {line.product.name} x {line.quantity} {line.product.unit}{marker}")
    msg.set_content("\n".join(lines), charset='utf-8')

    if pdf_path and os.path.exists(pdf_path):
        with open(pdf_path, 'rb') as f:
            msg.add_attachment(
                f.read(),
                maintype='application',
                subtype='pdf',
                filename=os.path.basename(pdf_path),
            )
    return msg


class OrderNotifier:
    """SMTP sender for order notifications."""

    def __init__(self, host: str = None, port: int = None, username: str = None,
                 password: str = None, sender: str = None, recipients: List[str] = None,
                 use_tls: bool = None, enabled: bool = None):
        self.host = host if host is not None else config.SMTP_HOST
        self.port = port if port is not None else config.SMTP_PORT
        self.username = username if username is not None else config.SMTP_USERNAME
        self.password = password if password is not None else config.SMTP_PASSWORD
        self.sender = sender if sender is not None else config.MAIL_SENDER
        self.recipients = recipients if recipients is not None else list(config.ORDER_NOTIFY_RECIPIENTS)
        self.use_tls = use_tls if use_tls is not None else config.SMTP_USE_TLS
        self.enabled = enabled if enabled is not None else config.ENABLE_ORDER_EMAILS

    @property
    def configured(self) -> bool:
        return bool(self.enabled and self.host and self.recipients)

    def notify_order(self, group: OrderGroup, requester: Employee,
                     pdf_path: Optional[str] = None) -> bool:
        """
        Email the order group to the configured recipients.

        Returns:
            True if the message was handed to the SMTP server, False otherwise
        """
        logger = get_logger()
        if not self.configured:
            logger.log_notification(group.order_id, False, "email disabled or not configured")
            return False

        smtp = None
        try:
            msg = build_order_message(group, requester, self.sender or self.username,
                                      self.recipients, pdf_path)
            smtp = smtplib.SMTP(self.host, self.port, timeout=config.SMTP_TIMEOUT)
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)
        except Exception as e:
            logger.error(f"Order {group.order_id} - email failed: {e}", component="Notify")
            logger.log_notification(group.order_id, False, str(e))
            return False
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except Exception:
                    pass

        logger.log_notification(group.order_id, True)
        return True
