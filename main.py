#!/usr/bin/env python
"""
Zebra Proxy - Standalone Entry Point

Run directly:
    python main.py

Or with environment variables:
    PRINTER_TYPE=virtual API_PORT=3000 python main.py
"""

import os
import sys

# Ensure package is importable when running directly
if __name__ == '__main__':
    package_dir = os.path.dirname(os.path.abspath(__file__))
    if package_dir not in sys.path:
        sys.path.insert(0, package_dir)

from zebra_proxy.app import main


if __name__ == '__main__':
    main()
