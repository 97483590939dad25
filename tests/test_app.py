import pytest

from conftest import FakeResponse
from zebra_proxy.app import create_app
from zebra_proxy.exceptions import UnsupportedKindError
from zebra_proxy.models import PrinterConfig

ZPL = '^XA^FO50,50^A0N,50,50^FDHello^FS^XZ'


@pytest.fixture
def virtual_client(virtual_config, fake_post):
    app = create_app(virtual_config)
    app.testing = True
    return app.test_client()


def _tcp_client(port):
    app = create_app(PrinterConfig(kind='tcp', host='127.0.0.1', port=port, timeout=1.0))
    app.testing = True
    return app.test_client()


def test_invalid_configuration_fails_at_startup() -> None:
    with pytest.raises(UnsupportedKindError):
        create_app(PrinterConfig(kind='parallel'))


def test_health(virtual_client) -> None:
    response = virtual_client.get('/health')

    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'
    assert response.get_json()['printerType'] == 'virtual'


def test_print_text_body_to_virtual_printer(virtual_client, fake_post, save_dir) -> None:
    response = virtual_client.post('/print', data=ZPL, content_type='text/plain')

    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['printerType'] == 'virtual'
    assert (save_dir / body['result']['filename']).exists()
    assert fake_post.calls[0]['data'] == ZPL.encode('utf-8')


def test_print_json_data_field(virtual_client, fake_post) -> None:
    response = virtual_client.post('/print', json={'data': ZPL})

    assert response.status_code == 200
    assert fake_post.calls[0]['data'] == ZPL.encode('utf-8')


def test_print_without_data_is_rejected(virtual_client, fake_post) -> None:
    response = virtual_client.post('/print', data=b'', content_type='text/plain')

    assert response.status_code == 400
    assert fake_post.calls == []


def test_oversized_payload_is_rejected_with_json(virtual_config, fake_post) -> None:
    app = create_app(virtual_config)
    app.testing = True
    app.config['MAX_CONTENT_LENGTH'] = 16

    response = app.test_client().post('/print', data=ZPL, content_type='text/plain')

    assert response.status_code == 413
    body = response.get_json()
    assert body['success'] is False
    assert body['printerType'] == 'virtual'
    assert '16 bytes' in body['error']
    assert fake_post.calls == []


def test_render_error_is_reported(virtual_client, fake_post) -> None:
    fake_post.response = FakeResponse(400, b'ERROR: Invalid ZPL')

    response = virtual_client.post('/print', data=ZPL, content_type='text/plain')

    assert response.status_code == 502
    body = response.get_json()
    assert body['success'] is False
    assert body['statusCode'] == 400
    assert 'Invalid ZPL' in body['error']


def test_print_to_tcp_printer(tcp_server) -> None:
    def answer(conn, release):
        conn.recv(4096)
        conn.sendall(b'OK')

    client = _tcp_client(tcp_server(answer))
    response = client.post('/print', json={'data': ZPL})

    assert response.status_code == 200
    assert response.get_json()['result']['response'] == 'OK'


def test_unreachable_tcp_printer(closed_port) -> None:
    response = _tcp_client(closed_port).post('/print', data=ZPL, content_type='text/plain')

    assert response.status_code == 502
    assert response.get_json()['printerType'] == 'tcp'


def test_printer_info(virtual_client) -> None:
    info = virtual_client.get('/printer/info').get_json()

    assert info['type'] == 'virtual'
    assert info['virtual']['apiEndpoint'] == 'http://labelary.test/v1/printers/8dpmm/labels/4x6/0/'


def test_printer_test_endpoint(virtual_client, fake_post) -> None:
    response = virtual_client.get('/printer/test')

    assert response.status_code == 200
    assert response.get_json()['result']['filename'].startswith('label_')


def test_label_lifecycle(virtual_client, fake_post) -> None:
    fake_post.response = FakeResponse(200, b'\x89PNG label')
    filename = virtual_client.post('/print', data=ZPL, content_type='text/plain').get_json()['result']['filename']

    listing = virtual_client.get('/labels').get_json()
    assert listing['count'] == 1
    assert listing['labels'][0]['filename'] == filename
    assert listing['labels'][0]['size'] == len(b'\x89PNG label')

    download = virtual_client.get(f'/labels/{filename}')
    assert download.status_code == 200
    assert download.mimetype == 'image/png'
    assert download.data == b'\x89PNG label'
    assert download.headers['Content-Disposition'].startswith('inline')
    download.close()

    assert virtual_client.delete(f'/labels/{filename}').status_code == 200
    assert virtual_client.get('/labels').get_json()['count'] == 0
    assert virtual_client.delete(f'/labels/{filename}').status_code == 404


def test_label_outside_save_directory_is_forbidden(virtual_client) -> None:
    response = virtual_client.get('/labels/nested/label.png')

    assert response.status_code == 403


def test_missing_label(virtual_client) -> None:
    assert virtual_client.get('/labels/label_missing.png').status_code == 404


def test_label_endpoints_need_virtual_printer(closed_port) -> None:
    client = _tcp_client(closed_port)

    assert client.get('/labels').status_code == 400
    assert client.get('/printer/test').status_code == 400
    assert client.delete('/labels/label.png').status_code == 400


def test_unknown_route_lists_endpoints(virtual_client) -> None:
    response = virtual_client.get('/nope')

    assert response.status_code == 404
    assert 'GET /labels (virtual only)' in response.get_json()['availableEndpoints']
