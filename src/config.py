"""
Configuration module for Sheet Order Tracker
Environment-agnostic: Works locally, in Docker, and on Google Cloud
Loads environment variables and validates configuration
"""
import os
import json
import tempfile
from pathlib import Path
from dotenv import load_dotenv

# Get project root directory (parent of src/)
PROJECT_ROOT = Path(__file__).parent.parent

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
    # Cloud Run sets K_SERVICE
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
            print(f"[CONFIG] Using credentials file: {creds_file}")
            return creds_file

    default_path = PROJECT_ROOT / 'config' / 'credentials.json'
    if default_path.exists():
        print(f"[CONFIG] Using default credentials file: {default_path}")
        return str(default_path)

    creds_json = os.getenv('GOOGLE_SHEETS_CREDENTIALS_JSON')
    if creds_json:
        temp_path = Path(tempfile.gettempdir()) / 'order_tracker_credentials.json'
        temp_path.write_text(creds_json)
        print("[CONFIG] Using credentials from environment variable (GOOGLE_SHEETS_CREDENTIALS_JSON)")
        return str(temp_path)

    if RUNTIME_ENVIRONMENT in ('cloud_run', 'kubernetes'):
        print("[CONFIG] Using Application Default Credentials (Workload Identity)")
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
# GOOGLE SHEETS
# ═══════════════════════════════════════════════════════════════════

GOOGLE_SHEET_ID = os.getenv('GOOGLE_SHEET_ID')

# Order rows: one row per line item
ORDERS_SHEET_NAME = os.getenv('ORDERS_SHEET_NAME', 'Orders')

# Reference lists (1-based column numbers)
PRODUCTS_SHEET_NAME = os.getenv('PRODUCTS_SHEET_NAME', 'Products')
PRODUCTS_COLUMN = int(os.getenv('PRODUCTS_COLUMN', '2'))  # B
COURIERS_SHEET_NAME = os.getenv('COURIERS_SHEET_NAME', 'Couriers')
COURIERS_COLUMN = int(os.getenv('COURIERS_COLUMN', '1'))  # A

# Orders tab column mapping (A-J)
ORDER_COLUMNS = [
    'Date',
    'OrderNo',
    'SetName',
    'PageNo',
    'RecipientName',
    'Address',
    'Phone',
    'ItemName',
    'ItemQty',
    'Courier',
]

# ═══════════════════════════════════════════════════════════════════
# WRITE LOCK
# ═══════════════════════════════════════════════════════════════════

# Seconds a writer waits for the sheet lock before giving up
WRITE_LOCK_TIMEOUT_SECONDS = float(os.getenv('WRITE_LOCK_TIMEOUT_SECONDS', '10'))

# ═══════════════════════════════════════════════════════════════════
# USER-FACING MESSAGES
# ═══════════════════════════════════════════════════════════════════

# Shown verbatim by the front end. Override with a JSON object in ORDER_MESSAGES.
_default_messages = {
    'init_loaded': 'โหลดข้อมูลเริ่มต้นสำเร็จ',
    'save_success': 'บันทึกข้อมูลเรียบร้อยแล้ว',
    'update_success': 'แก้ไขออเดอร์ {order_no} เรียบร้อยแล้ว',
    'delete_success': 'ลบออเดอร์ {order_no} เรียบร้อยแล้ว ({count} รายการ)',
    'orders_loaded': 'โหลดข้อมูลออเดอร์สำเร็จ',
    'not_found': 'ไม่พบเลขที่ออเดอร์ {order_no}',
    'busy': 'ระบบกำลังบันทึกข้อมูลอื่นอยู่ กรุณาลองใหม่อีกครั้ง',
    'error': 'เกิดข้อผิดพลาด: {error}',
}
MESSAGES = {**_default_messages, **json.loads(os.getenv('ORDER_MESSAGES', '{}'))}

# ═══════════════════════════════════════════════════════════════════
# REST API (FastAPI)
# ═══════════════════════════════════════════════════════════════════

API_PORT = int(os.getenv('API_PORT', '8000'))
API_HOST = os.getenv('API_HOST', '0.0.0.0')

# Cloud Run sets PORT to the single port it routes traffic to
_cloud_run_port = os.getenv('PORT')
if _cloud_run_port:
    API_PORT = int(_cloud_run_port)

# CORS configuration (comma-separated origins)
API_CORS_ORIGINS = os.getenv('API_CORS_ORIGINS', 'http://localhost:3000').split(',')

# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_DIR = os.getenv('LOG_DIR', str(PROJECT_ROOT / 'logs'))
LOG_FILE_MAX_MB = int(os.getenv('LOG_FILE_MAX_MB', '10'))
LOG_FILE_BACKUP_COUNT = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))


def validate_config():
    """Validate that all required configuration is present"""
    errors = []

    print(f"[CONFIG] Runtime environment: {RUNTIME_ENVIRONMENT}")

    if not GOOGLE_SHEET_ID:
        errors.append("GOOGLE_SHEET_ID is not set")

    if WRITE_LOCK_TIMEOUT_SECONDS <= 0:
        errors.append("WRITE_LOCK_TIMEOUT_SECONDS must be positive")

    try:
        creds_path = get_credentials_path()
        if creds_path and not os.path.exists(creds_path):
            errors.append(f"Google Sheets credentials file not found: {creds_path}")
    except ValueError as e:
        errors.append(str(e))

    if errors:
        raise ValueError("Configuration errors:\n" + "\n".join(errors))

    return True


if __name__ == "__main__":
    try:
        validate_config()
        print("[OK] Configuration validated successfully")
    except ValueError as e:
        print(f"[FAIL] Configuration validation failed:\n{e}")
