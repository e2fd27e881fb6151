"""Тести HTTP-сервера"""
import base64
import http.client
import io
import threading
import zipfile
from urllib.parse import urlparse

import httpx
import pytest

from scorm_kit.server import ScormKitServer


@pytest.fixture
def server(tmp_root, assets_dir, pdf_transport):
    srv = ScormKitServer(('127.0.0.1', 0), tmp_root=tmp_root, static_dir=assets_dir,
                         transport=pdf_transport, max_upload_bytes=1024 * 1024)
    srv.proxy_whitelist = None
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    srv.server_close()


@pytest.fixture
def client(server):
    host, port = server.server_address[:2]
    with httpx.Client(base_url=f"http://{host}:{port}", trust_env=False, timeout=30) as c:
        yield c


def test_healthz(client):
    response = client.get('/healthz')
    assert response.status_code == 200
    assert response.text == 'ok'
    assert response.headers['access-control-allow-origin'] == '*'


def test_options_preflight(client):
    response = client.request('OPTIONS', '/package')
    assert response.status_code == 200
    assert 'POST' in response.headers['access-control-allow-methods']


class TestStatic:

    def test_root_serves_player(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.headers['content-type'].startswith('text/html')
        assert 'startViewerWithPdf' in response.text

    def test_assets(self, client):
        assert client.get('/js/player-viewer.js').status_code == 200
        assert client.get('/nope.js').status_code == 404

    def test_path_traversal(self, server):
        conn = http.client.HTTPConnection(*server.server_address[:2], timeout=30)
        try:
            conn.request('GET', '/%2e%2e/settings.py')
            response = conn.getresponse()
            response.read()
        finally:
            conn.close()
        assert response.status == 404


class TestRender:

    def test_missing_url(self, client):
        response = client.get('/render')
        assert response.status_code == 400
        assert response.text == 'Missing url param'

    def test_invalid_url(self, client):
        response = client.get('/render', params={'url': 'ftp://x/a.pptx'})
        assert response.status_code == 400
        assert response.text == 'Invalid url'

    def test_pdf_is_served_back(self, client, pdf_bytes):
        response = client.get('/render', params={'url': 'https://cdn.example.com/lesson.pdf'})

        assert response.status_code == 200
        pdf_url = response.json()['pdf']
        assert pdf_url.endswith('/lesson.pdf')

        served = client.get(urlparse(pdf_url).path)
        assert served.status_code == 200
        assert served.content == pdf_bytes
        assert served.headers['content-type'] == 'application/pdf'

    def test_upstream_failure(self, client):
        response = client.get('/render', params={'url': 'https://cdn.example.com/missing.pdf'})
        assert response.status_code == 502

    def test_unknown_files(self, client):
        assert client.get('/files/nope/lesson.pdf').status_code == 404


class TestUpload:

    def test_pdf_upload(self, client, pdf_bytes):
        response = client.post('/upload', json={
            'file_name': '../lesson.pdf',
            'file_content': base64.b64encode(pdf_bytes).decode('ascii'),
        })

        assert response.status_code == 200
        served = client.get(urlparse(response.json()['pdf']).path)
        assert served.content == pdf_bytes

    def test_invalid_base64(self, client):
        response = client.post('/upload', json={'file_name': 'a.pdf', 'file_content': '***'})
        assert response.status_code == 400
        assert response.text == 'Invalid Base64 file'

    def test_empty_upload(self, client):
        response = client.post('/upload', json={'file_name': 'a.pdf', 'file_content': ''})
        assert response.status_code == 400

    def test_unsupported_type(self, client):
        response = client.post('/upload', json={
            'file_name': 'notes.txt',
            'file_content': base64.b64encode(b'hello').decode('ascii'),
        })
        assert response.status_code == 400

    def test_too_large(self, client):
        content = base64.b64encode(b'0' * (1024 * 1024 + 1)).decode('ascii')
        response = client.post('/upload', json={'file_name': 'a.pdf', 'file_content': content})
        assert response.status_code == 413

    def test_invalid_json(self, client):
        response = client.post('/upload', content=b'{not json', headers={'Content-Type': 'application/json'})
        assert response.status_code == 400

    @pytest.mark.parametrize('length', ['abc', '-5'])
    def test_invalid_content_length(self, server, length):
        conn = http.client.HTTPConnection(*server.server_address[:2], timeout=30)
        try:
            conn.putrequest('POST', '/upload')
            conn.putheader('Content-Length', length)
            conn.endheaders()
            response = conn.getresponse()
            body = response.read()
        finally:
            conn.close()
        assert response.status == 400
        assert body == b'Invalid Content-Length'


class TestProxy:

    def test_passthrough(self, client, pdf_bytes):
        response = client.get('/proxy', params={'url': 'https://cdn.example.com/lesson.pdf'})

        assert response.status_code == 200
        assert response.content == pdf_bytes
        assert response.headers['content-type'] == 'application/pdf'

    def test_upstream_error(self, client):
        response = client.get('/proxy', params={'url': 'https://cdn.example.com/missing.pdf'})
        assert response.status_code == 502
        assert response.text == 'Upstream returned 404'

    def test_whitelist(self, server, client):
        server.proxy_whitelist = ['cdn.example.com']

        assert client.get('/proxy', params={'url': 'https://evil.example.com/a.pdf'}).status_code == 403
        assert client.get('/proxy', params={'url': 'https://cdn.example.com/a.pdf'}).status_code == 200

    def test_compressed_upstream_is_decoded(self, client, pdf_bytes):
        response = client.get('/proxy', params={'url': 'https://cdn.example.com/gzipped.pdf'})

        assert response.status_code == 200
        assert 'content-encoding' not in response.headers
        assert response.content == pdf_bytes

    def test_upstream_break_after_headers(self, client):
        response = client.get('/proxy', params={'url': 'https://cdn.example.com/broken.pdf'})

        assert response.status_code == 200
        assert response.content == b'%PDF-partial'
        assert b'Proxy error' not in response.content

    def test_missing_url(self, client):
        assert client.get('/proxy').status_code == 400


class TestPackage:

    def test_zip_response(self, client, pdf_bytes):
        response = client.post('/package', json={
            'pdfUrl': 'https://cdn.example.com/lesson.pdf',
            'config': {'title': 'Вступ', 'slideSequenceLocked': False},
        })

        assert response.status_code == 200
        assert response.headers['content-type'] == 'application/zip'
        assert 'scorm_package.zip' in response.headers['content-disposition']
        with zipfile.ZipFile(io.BytesIO(response.content)) as zipf:
            assert zipf.read('data/content.pdf') == pdf_bytes
            assert 'slideSequenceLocked: false,' in zipf.read('Config.js').decode('utf-8')

    def test_missing_pdf_url(self, client):
        response = client.post('/package', json={'config': {}})
        assert response.status_code == 400

    def test_invalid_config(self, client):
        response = client.post('/package', json={
            'pdfUrl': 'https://cdn.example.com/lesson.pdf',
            'config': {'navPosition': 'top'},
        })
        assert response.status_code == 400

    def test_upstream_failure(self, client):
        response = client.post('/package', json={'pdfUrl': 'https://cdn.example.com/missing.pdf'})
        assert response.status_code == 502
        assert 'Package generation error' in response.text

    def test_unknown_post_route(self, client):
        assert client.post('/nope', json={}).status_code == 404

    def test_local_path_is_rejected(self, client, pdf_file):
        response = client.post('/package', json={'pdfUrl': pdf_file})
        assert response.status_code == 400
