"""
Zebra Print Proxy
=================

Small HTTP-to-printer proxy for ZPL label printers.

Supports:
- Network printers (raw TCP, port 9100)
- USB printers (bulk transfer via pyusb)
- Virtual printer (renders through the Labelary API and saves the result)

Usage:
    python -m zebra_proxy

API Endpoints:
    GET    /health               - Health check
    POST   /print                - Send a print payload
    GET    /printer/info         - Active printer configuration
    GET    /printer/test         - Render a sample label (virtual)
    GET    /labels               - List saved labels (virtual)
    GET    /labels/{filename}    - Download a saved label (virtual)
    DELETE /labels/{filename}    - Delete a saved label (virtual)
"""

__version__ = '1.0.0'
__author__ = 'Zebra Proxy Contributors'
