"""
Structured Logging System for the Supply Order System
Provides rotating file logs with immediate flush for real-time monitoring
"""
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler


class OrderLogger:
    """Centralized logging with rotation and formatting"""

    def __init__(self, name="Supply-Orders", log_dir="logs", log_level="INFO",
                 max_mb=10, backup_count=5):
        """
        Initialize logger with rotating file handlers

        Args:
            name: Logger name
            log_dir: Directory for log files
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            max_mb: Size of the main log file before it rotates
            backup_count: Rotated main log files to keep
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        self.logger.handlers.clear()

        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        log_format = logging.Formatter(
            '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # 1. Main rotating file handler
        main_handler = RotatingFileHandler(
            log_path / 'supply_orders.log',
            maxBytes=max_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        )
        main_handler.setLevel(logging.DEBUG)
        main_handler.setFormatter(log_format)
        self.logger.addHandler(main_handler)

        # 2. Error-only log file (5MB per file, keep 3 files)
        error_handler = RotatingFileHandler(
            log_path / 'errors.log',
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(log_format)
        self.logger.addHandler(error_handler)

        # 3. Console
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(log_format)
        self.logger.addHandler(console_handler)

    def debug(self, message, component=""):
        self._log(logging.DEBUG, message, component)

    def info(self, message, component=""):
        self._log(logging.INFO, message, component)

    def warning(self, message, component=""):
        self._log(logging.WARNING, message, component)

    def error(self, message, component="", exc_info=False):
        self._log(logging.ERROR, message, component, exc_info=exc_info)

    def critical(self, message, component="", exc_info=False):
        self._log(logging.CRITICAL, message, component, exc_info=exc_info)

    def _log(self, level, message, component="", exc_info=False):
        """Internal logging method with component prefix"""
        if component:
            message = f"[{component}] {message}"

        self.logger.log(level, message, exc_info=exc_info)

        for handler in self.logger.handlers:
            handler.flush()

    def log_submission(self, base_id, requester, group_count, line_count):
        """Log the start of a cart submission"""
        self.info(
            f"Submission {base_id} - {line_count} line(s) in {group_count} group(s) by {requester}",
            component="Orders"
        )

    def log_ledger_append(self, order_id, written, total):
        """Log ledger rows written for one order group"""
        level = logging.INFO if written == total else logging.ERROR
        self._log(
            level,
            f"Order {order_id} - appended {written}/{total} ledger row(s)",
            component="Ledger"
        )

    def log_receive(self, order_id, changed, product_names=None):
        """Log a receive action"""
        scope = "all pending" if product_names is None else f"{len(product_names)} selected"
        self.info(
            f"Order {order_id} - received {changed} row(s) ({scope})",
            component="Receiving"
        )

    def log_notification(self, order_id, sent, detail=""):
        """Log the outcome of a notification email"""
        if sent:
            self.info(f"Order {order_id} - notification sent", component="Notify")
        else:
            self.warning(f"Order {order_id} - notification not sent: {detail}", component="Notify")


# Global logger instance
_global_logger = None

def get_logger(log_level=None):
    """Get or create global logger instance"""
    global _global_logger
    if _global_logger is None:
        from supply_orders import config
        _global_logger = OrderLogger(
            log_dir=config.LOG_FOLDER,
            log_level=log_level or config.LOG_LEVEL,
            max_mb=config.LOG_FILE_MAX_MB,
            backup_count=config.LOG_FILE_BACKUP_COUNT,
        )
    return _global_logger
