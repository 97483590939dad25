"""
Zebra Proxy Configuration
"""

import os

from dotenv import find_dotenv, load_dotenv


def load_environment(env_file=None):
    """Load a .env file into os.environ. Variables already set are kept."""
    return load_dotenv(env_file or find_dotenv(usecwd=True))


# Picks up ./.env (or the nearest one above it) before the constants below are read
load_environment()

# =============================================================================
# Server Configuration
# =============================================================================

PORT = int(os.environ.get('API_PORT', 3000))
HOST = os.environ.get('API_HOST', '0.0.0.0')
DEBUG = os.environ.get('API_DEBUG', 'false').lower() == 'true'

# Largest accepted print payload
MAX_PAYLOAD_BYTES = int(os.environ.get('MAX_PAYLOAD_BYTES', 10 * 1024 * 1024))

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_DIR = os.environ.get('LOG_DIR')  # unset: console only

# =============================================================================
# Printer Defaults
# =============================================================================

DEFAULT_PRINTER_TYPE = 'tcp'

# Raw network printers
DEFAULT_TCP_PORT = 9100
DEFAULT_TCP_TIMEOUT = 5.0  # seconds to wait for a printer reply
TCP_CONNECT_TIMEOUT = 10.0
TCP_RECV_SIZE = 4096

# USB printers (0x0A5F is Zebra Technologies)
DEFAULT_USB_VENDOR_ID = 0x0A5F
USB_WRITE_TIMEOUT_MS = 5000

# =============================================================================
# Virtual Printer (Labelary)
# =============================================================================

LABELARY_URL = 'http://api.labelary.com/v1/printers'
DEFAULT_DPMM = '8dpmm'  # 8dpmm (203 DPI), 12dpmm (300 DPI), 24dpmm (600 DPI)
DEFAULT_LABEL_WIDTH_MM = 101.6  # 4 inches
DEFAULT_LABEL_HEIGHT_MM = 152.4  # 6 inches
DEFAULT_LABEL_INDEX = 0
DEFAULT_OUTPUT_FORMAT = 'png'
DEFAULT_SAVE_DIRECTORY = './generated_labels'
RENDER_TIMEOUT = 10  # seconds

MM_PER_INCH = 25.4

# =============================================================================
# Output Formats
# =============================================================================

OUTPUT_FORMATS = {
    'png': {
        'accept': 'image/png',
        'extension': 'png',
        'kind': 'image',
    },
    'pdf': {
        'accept': 'application/pdf',
        'extension': 'pdf',
        'kind': 'document',
    },
    'json': {
        'accept': 'application/json',
        'extension': 'json',
        'kind': 'structured-data',
    },
}

GENERIC_CONTENT_TYPE = 'application/octet-stream'

# Sample label sent by the virtual printer connection test
TEST_LABEL_ZPL = (
    '^XA^FO50,50^A0N,50,50^FDTest Label^FS'
    '^FO50,120^A0N,30,30^FDVirtual Printer^FS^XZ'
)
