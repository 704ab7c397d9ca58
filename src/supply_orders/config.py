"""
Configuration module for the Supply Order System
Environment-agnostic: Works locally, in Docker, and on Google Cloud
Loads environment variables and validates configuration
"""
import os
import tempfile
from pathlib import Path
from dotenv import load_dotenv

# Project root (parent of src/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file (if exists - local dev only)
env_file = PROJECT_ROOT / '.env'
if env_file.exists():
    load_dotenv(env_file)

# ═══════════════════════════════════════════════════════════════════
# ENVIRONMENT DETECTION
# ═══════════════════════════════════════════════════════════════════

def detect_environment() -> str:
    """
    Detect which environment we're running in

    Returns:
        'cloud_run', 'kubernetes', 'docker', or 'local'
    """
    if os.getenv('K_SERVICE'):
        return 'cloud_run'

    if os.getenv('KUBERNETES_SERVICE_HOST'):
        return 'kubernetes'

    if Path('/.dockerenv').exists():
        return 'docker'

    if os.getenv('GOOGLE_CLOUD_PROJECT') or os.getenv('GCP_PROJECT'):
        return 'cloud_run'

    return 'local'

RUNTIME_ENVIRONMENT = detect_environment()

# ═══════════════════════════════════════════════════════════════════
# CREDENTIAL RESOLUTION
# ═══════════════════════════════════════════════════════════════════

_credentials_path = None  # Lazy loaded

def resolve_credentials() -> str:
    """
    Resolve Google Sheets credentials from multiple sources.
    Priority order:
    1. Local file (GOOGLE_SHEETS_CREDENTIALS_FILE env var or default path)
    2. JSON string in environment variable (GOOGLE_SHEETS_CREDENTIALS_JSON)
    3. Application Default Credentials (for Workload Identity)

    Returns:
        Path to credentials JSON file (may be temp file for JSON string sources)
        None if using Application Default Credentials
    """
    creds_file = os.getenv('GOOGLE_SHEETS_CREDENTIALS_FILE')
    if creds_file:
        if not os.path.isabs(creds_file):
            creds_file = str(PROJECT_ROOT / creds_file)
        if os.path.exists(creds_file):
            return creds_file

    default_path = PROJECT_ROOT / 'config' / 'credentials.json'
    if default_path.exists():
        return str(default_path)

    creds_json = os.getenv('GOOGLE_SHEETS_CREDENTIALS_JSON')
    if creds_json:
        temp_path = Path(tempfile.gettempdir()) / 'supply_orders_credentials.json'
        temp_path.write_text(creds_json)
        return str(temp_path)

    if RUNTIME_ENVIRONMENT in ('cloud_run', 'kubernetes'):
        return None  # Signal to use ADC

    raise ValueError(
        "No valid credentials source found. Set one of:\n"
        "  - GOOGLE_SHEETS_CREDENTIALS_FILE (path to JSON file)\n"
        "  - GOOGLE_SHEETS_CREDENTIALS_JSON (JSON string)\n"
        "  - Place credentials.json in config/ folder"
    )

def get_credentials_path():
    """Get credentials path (lazy loaded)"""
    global _credentials_path
    if _credentials_path is None:
        _credentials_path = resolve_credentials()
    return _credentials_path

# ═══════════════════════════════════════════════════════════════════
# WRITABLE PATHS - Handle containerized environments
# ═══════════════════════════════════════════════════════════════════

def get_writable_path(folder_name: str) -> str:
    """Get a writable path that works in all environments"""
    env_path = os.getenv(folder_name.upper() + '_FOLDER')
    if env_path:
        if os.path.isabs(env_path):
            path = Path(env_path)
        else:
            path = PROJECT_ROOT / env_path
    else:
        path = PROJECT_ROOT / folder_name

    # In containers, /app might be read-only; use /tmp as fallback
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except (PermissionError, OSError):
            path = Path(tempfile.gettempdir()) / 'supply_orders' / folder_name
            path.mkdir(parents=True, exist_ok=True)

    return str(path)

# ═══════════════════════════════════════════════════════════════════
# GOOGLE SHEETS WORKBOOK
# ═══════════════════════════════════════════════════════════════════

GOOGLE_SHEET_ID = os.getenv('GOOGLE_SHEET_ID')

PRODUCTS_SHEET_NAME = os.getenv('PRODUCTS_SHEET_NAME', 'Products')
EMPLOYEES_SHEET_NAME = os.getenv('EMPLOYEES_SHEET_NAME', 'EmpList')
ORDERS_SHEET_NAME = os.getenv('ORDERS_SHEET_NAME', 'Orders')
PRODUCT_HISTORY_SHEET_NAME = os.getenv('PRODUCT_HISTORY_SHEET_NAME', 'ProductHistory')

PRODUCTS_COLUMNS = [
    'id', 'name', 'category', 'price', 'unit', 'stockStatus', 'supplier', 'image'
]

# One row per ordered line item
ORDERS_COLUMNS = [
    'OrderId', 'Date', 'Orderer', 'Supplier', 'ProductName',
    'Quantity', 'Unit', 'Urgent', 'Status', 'ReceivedQty', 'ReceivedDate'
]

PRODUCT_HISTORY_COLUMNS = [
    'Timestamp', 'ProductId', 'Field', 'OldValue', 'NewValue', 'Updater'
]

# Header aliases. Sheet headers are maintained by hand (and partly in
# Japanese), so every logical field accepts several spellings.
PRODUCT_FIELD_ALIASES = {
    'id': ['id', 'ID', 'No'],
    'name': ['name', '商品名', '品名'],
    'category': ['category', 'カテゴリ', '分類'],
    'price': ['price', '単価', '価格'],
    'unit': ['unit', '単位'],
    'stock_status': ['stockStatus', '在庫状況', '在庫'],
    'supplier': ['supplier', 'Supplier', '発注先', '業者', '仕入先'],
    'image': ['image', '画像', '画像URL'],
}

EMPLOYEE_FIELD_ALIASES = {
    'code': ['社員code', 'id', 'Code'],
    'name': ['氏名', 'name', 'Name'],
    'factory': ['工場', 'factory', 'Factory'],
    'code_name': ['Code+Name', 'codeName'],
}

LEDGER_FIELD_ALIASES = {
    'order_id': ['OrderId', 'Order ID', '注文ID'],
    'date': ['Date', 'Timestamp', '発注日'],
    'orderer': ['Orderer', '発注者'],
    'supplier': ['Supplier', '発注先'],
    'product_name': ['ProductName', 'Product Name', '品名'],
    'quantity': ['Quantity', '数量'],
    'unit': ['Unit', '単位'],
    'urgent': ['Urgent', '至急'],
    'status': ['Status', 'ステータス'],
    'received_qty': ['ReceivedQty', 'Received Qty', '受入数'],
    'received_date': ['ReceivedDate', 'Received Date', '受入日'],
}

# ═══════════════════════════════════════════════════════════════════
# CATALOG DEFAULTS
# ═══════════════════════════════════════════════════════════════════

SUPPLIER_PLACEHOLDER = os.getenv('SUPPLIER_PLACEHOLDER', 'unspecified')
DEFAULT_PRODUCT_NAME = os.getenv('DEFAULT_PRODUCT_NAME', '(unnamed)')
DEFAULT_CATEGORY = os.getenv('DEFAULT_CATEGORY', 'uncategorized')
DEFAULT_UNIT = os.getenv('DEFAULT_UNIT', 'pcs')
DEFAULT_STOCK_STATUS = os.getenv('DEFAULT_STOCK_STATUS', 'In Stock')

# Employee lookup starts once this many characters of the code are typed
EMPLOYEE_CODE_MIN_LENGTH = int(os.getenv('EMPLOYEE_CODE_MIN_LENGTH', '3'))

# ═══════════════════════════════════════════════════════════════════
# ORDER DOCUMENTS
# ═══════════════════════════════════════════════════════════════════

ORDER_ID_PREFIX = os.getenv('ORDER_ID_PREFIX', 'ORD-')
ORDER_FOLDER = get_writable_path('orders')  # Folder for order PDFs

COMPANY_NAME = os.getenv('COMPANY_NAME', 'Goko Co., Ltd.')
COMPANY_CONTACT_LINES = [
    line.strip()
    for line in os.getenv(
        'COMPANY_CONTACT_LINES',
        'Ibaraki plant  tel 0296-48-3020  fax 0296-48-3022|'
        'Koga plant  tel 0280-98-6222  fax 0280-98-6231'
    ).split('|')
    if line.strip()
]
ORDER_DOCUMENT_NOTE = os.getenv(
    'ORDER_DOCUMENT_NOTE',
    'On delivery we will check the QR code at the top right, or the order ID.'
)
URGENT_MARKER = '★'

# ═══════════════════════════════════════════════════════════════════
# NOTIFICATION EMAIL
# ═══════════════════════════════════════════════════════════════════

ENABLE_ORDER_EMAILS = os.getenv('ENABLE_ORDER_EMAILS', 'true').lower() == 'true'
SMTP_HOST = os.getenv('SMTP_HOST', '')
SMTP_PORT = int(os.getenv('SMTP_PORT', '587'))
SMTP_USERNAME = os.getenv('SMTP_USERNAME', '')
SMTP_PASSWORD = os.getenv('SMTP_PASSWORD', '')
SMTP_USE_TLS = os.getenv('SMTP_USE_TLS', 'true').lower() == 'true'
SMTP_TIMEOUT = int(os.getenv('SMTP_TIMEOUT', '30'))
MAIL_SENDER = os.getenv('MAIL_SENDER', SMTP_USERNAME)
ORDER_NOTIFY_RECIPIENTS = [
    addr.strip()
    for addr in os.getenv('ORDER_NOTIFY_RECIPIENTS', '').split(',')
    if addr.strip()
]

# ═══════════════════════════════════════════════════════════════════
# MONITORING
# ═══════════════════════════════════════════════════════════════════

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FILE_MAX_MB = int(os.getenv('LOG_FILE_MAX_MB', '10'))
LOG_FILE_BACKUP_COUNT = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))
LOG_FOLDER = get_writable_path('logs')

# ═══════════════════════════════════════════════════════════════════
# REST API (FastAPI + Swagger)
# ═══════════════════════════════════════════════════════════════════

API_PORT = int(os.getenv('API_PORT', '8000'))
API_HOST = os.getenv('API_HOST', '0.0.0.0')

# Cloud Run sets PORT to the single port it routes traffic to
_cloud_run_port = os.getenv('PORT')
if _cloud_run_port:
    API_PORT = int(_cloud_run_port)

# CORS configuration (comma-separated origins)
API_CORS_ORIGINS = os.getenv('API_CORS_ORIGINS', 'http://localhost:5173').split(',')


def validate_config():
    """Validate that all required configuration is present"""
    errors = []

    if not GOOGLE_SHEET_ID:
        errors.append("GOOGLE_SHEET_ID is not set")

    try:
        creds_path = get_credentials_path()
        if creds_path and not os.path.exists(creds_path):
            errors.append(f"Google Sheets credentials file not found: {creds_path}")
    except ValueError as e:
        errors.append(str(e))

    if ENABLE_ORDER_EMAILS:
        if not SMTP_HOST:
            errors.append("SMTP_HOST is not set (or set ENABLE_ORDER_EMAILS=false)")
        if not ORDER_NOTIFY_RECIPIENTS:
            errors.append("ORDER_NOTIFY_RECIPIENTS is not set")

    if errors:
        raise ValueError("Configuration errors:\n" + "\n".join(errors))

    return True


if __name__ == "__main__":
    try:
        validate_config()
        print("[OK] Configuration validated successfully")
    except ValueError as e:
        print(f"[FAIL] Configuration validation failed:\n{e}")
