"""
Zebra Proxy Client
==================

Python SDK for talking to a running Zebra Proxy.

Usage:
    from zebra_proxy.client import PrintProxyClient

    client = PrintProxyClient('http://localhost:3000')

    # Print a label
    client.print_label('^XA^FO50,50^A0N,50,50^FDHello^FS^XZ')

    # Virtual printer: fetch the rendered labels
    for label in client.list_labels():
        png = client.download_label(label['filename'])
"""

import requests
from typing import Dict, Any, Optional, List, Union


class PrintProxyClient:
    """Client for Zebra Proxy."""

    def __init__(self, base_url: str = 'http://localhost:3000', timeout: float = 30):
        """
        Initialize client.

        Args:
            base_url: Base URL of the proxy
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """Make API request and decode the JSON answer."""
        url = f'{self.base_url}{endpoint}'

        try:
            response = requests.request(method, url, timeout=self.timeout, **kwargs)
            return response.json()

        except requests.exceptions.Timeout:
            return {'success': False, 'error': 'Request timeout'}
        except requests.exceptions.ConnectionError:
            return {'success': False, 'error': f'Cannot connect to {self.base_url}'}
        except ValueError:
            return {'success': False, 'error': f'Invalid response from {url}'}

    # =========================================================================
    # Health
    # =========================================================================

    def health(self) -> Dict[str, Any]:
        """Check service health."""
        return self._request('GET', '/health')

    def is_online(self) -> bool:
        """Check if service is online."""
        return self.health().get('status') == 'ok'

    def printer_info(self) -> Dict[str, Any]:
        """Configuration of the active printer."""
        return self._request('GET', '/printer/info')

    # =========================================================================
    # Printing
    # =========================================================================

    def print_label(self, data: Union[str, bytes]) -> Dict[str, Any]:
        """
        Send a print payload.

        Args:
            data: ZPL (or any raw command stream) as text or bytes
        """
        if isinstance(data, str):
            data = data.encode('utf-8')
        return self._request(
            'POST', '/print', data=data, headers={'Content-Type': 'text/plain; charset=utf-8'}
        )

    def print_file(self, file_path: str) -> Dict[str, Any]:
        """Send the contents of a file."""
        with open(file_path, 'rb') as f:
            return self.print_label(f.read())

    def test_printer(self) -> Dict[str, Any]:
        """Render the sample label (virtual printer only)."""
        return self._request('GET', '/printer/test')

    # =========================================================================
    # Saved Labels
    # =========================================================================

    def list_labels(self) -> List[Dict[str, Any]]:
        """Saved labels, newest first."""
        result = self._request('GET', '/labels')
        return result.get('labels', [])

    def download_label(self, filename: str) -> Optional[bytes]:
        """Raw contents of a saved label, or None if unavailable."""
        try:
            response = requests.get(f'{self.base_url}/labels/{filename}', timeout=self.timeout)
        except requests.exceptions.RequestException:
            return None
        return response.content if response.status_code == 200 else None

    def delete_label(self, filename: str) -> Dict[str, Any]:
        """Delete a saved label."""
        return self._request('DELETE', f'/labels/{filename}')
