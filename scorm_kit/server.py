# -*- coding: utf-8 -*-
"""
HTTP-сервер SCORM-KIT

Маршрути:
    GET  /healthz          - перевірка стану
    GET  /render?url=...   - завантажити офісний документ, конвертувати в PDF
    POST /upload           - JSON {file_name, file_content (base64)} -> PDF
    GET  /proxy?url=...    - проксі для зовнішніх ресурсів (обхід CORS)
    POST /package          - JSON {pdfUrl, config} -> ZIP SCORM-пакету
    GET  /files/<id>/<ім'я> - файли, створені /render та /upload
    GET  /...              - файли переглядача
"""

import base64
import binascii
import json
import mimetypes
import os
import shutil
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, unquote, urlparse

import httpx

from .converter import ensure_pdf
from .download import download_file, filename_from_url, safe_filename, validate_url
from .errors import InputError, ScormKitError, UpstreamFetchError
from .packager import PackageAssembler
from . import settings
from .workdir import create_workdir, remove_workdir, schedule_cleanup

CHUNK_SIZE = 64 * 1024


class PayloadTooLarge(InputError):
    """Тіло запиту перевищує MAX_UPLOAD_BYTES"""


class ScormKitServer(ThreadingHTTPServer):
    """
    HTTP-сервер зі спільними налаштуваннями для обробників

    Args:
        address (tuple): (host, port)
        assembler (PackageAssembler): Збирач пакетів
        tmp_root (str): Коренева тимчасова директорія
        static_dir (str): Файли переглядача
        transport: Транспорт httpx для завантажень (для тестів)
        proxy_whitelist (list): Дозволені хости для /proxy або None
    """

    daemon_threads = True

    def __init__(self, address, assembler=None, tmp_root=None, static_dir=None, transport=None,
                 proxy_whitelist=None, max_upload_bytes=None, retention=None,
                 handler_class=None):
        super().__init__(address, handler_class or ScormKitHandler)
        self.tmp_root = tmp_root or settings.TMP_ROOT
        self.static_dir = static_dir or settings.STATIC_DIR
        self.transport = transport
        self.proxy_whitelist = proxy_whitelist if proxy_whitelist is not None else settings.PROXY_WHITELIST
        self.max_upload_bytes = max_upload_bytes or settings.MAX_UPLOAD_BYTES
        self.retention = retention if retention is not None else settings.RENDER_RETENTION_SECONDS
        self.assembler = assembler or PackageAssembler(
            assets_dir=self.static_dir, tmp_root=self.tmp_root, transport=transport
        )
        os.makedirs(self.tmp_root, exist_ok=True)

        self._files = {}
        self._files_lock = threading.Lock()

    def register_files(self, workdir_id, path):
        with self._files_lock:
            self._files[workdir_id] = path
        schedule_cleanup(path, self.retention, action=self._expire)

    def _expire(self, path):
        with self._files_lock:
            for workdir_id, registered in list(self._files.items()):
                if registered == path:
                    del self._files[workdir_id]
        remove_workdir(path)

    def lookup_files(self, workdir_id):
        with self._files_lock:
            return self._files.get(workdir_id)


class ScormKitHandler(BaseHTTPRequestHandler):
    server_version = 'ScormKit/0.3'

    def log_message(self, format, *args):
        print(f"{self.address_string()} - {format % args}")

    # --- Відповіді ---

    def _send_cors(self):
        self.send_header('Access-Control-Allow-Origin', '*')

    def _send_text(self, status, text):
        body = text.encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'text/plain; charset=utf-8')
        self.send_header('Content-Length', str(len(body)))
        self._send_cors()
        self.end_headers()
        self.wfile.write(body)

    def _send_json(self, status, payload):
        body = json.dumps(payload).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        self._send_cors()
        self.end_headers()
        self.wfile.write(body)

    def _send_error_for(self, prefix, error):
        print(f"{prefix}: {error}")
        if isinstance(error, PayloadTooLarge):
            self._send_text(413, str(error))
        elif isinstance(error, InputError):
            self._send_text(400, str(error))
        elif isinstance(error, UpstreamFetchError):
            self._send_text(502, f"{prefix}: {error}")
        else:
            self._send_text(500, f"{prefix}: {error}")

    def _send_file(self, path):
        content_type = mimetypes.guess_type(path)[0] or 'application/octet-stream'
        self.send_response(200)
        self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(os.path.getsize(path)))
        self._send_cors()
        self.end_headers()
        with open(path, 'rb') as f:
            shutil.copyfileobj(f, self.wfile, CHUNK_SIZE)

    def _read_json(self):
        try:
            length = int(self.headers.get('Content-Length', 0) or 0)
        except ValueError as e:
            raise InputError("Invalid Content-Length") from e
        if length < 0:
            raise InputError("Invalid Content-Length")
        limit = self.server.max_upload_bytes * 4 // 3 + 4096
        if length > limit:
            raise PayloadTooLarge("Запит завеликий")
        data = self.rfile.read(length) if length else b''
        try:
            body = json.loads(data.decode('utf-8') or '{}')
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InputError("Invalid JSON") from e
        if not isinstance(body, dict):
            raise InputError("Invalid JSON")
        return body

    def _public_url(self, path):
        host = self.headers.get('Host') or f"{self.server.server_address[0]}:{self.server.server_address[1]}"
        return f"http://{host}{path}"

    # --- Маршрутизація ---

    def do_OPTIONS(self):
        self.send_response(200)
        self._send_cors()
        self.send_header('Access-Control-Allow-Methods', 'GET, POST, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type')
        self.send_header('Content-Length', '0')
        self.end_headers()

    def do_GET(self):
        parsed = urlparse(self.path)
        query = parse_qs(parsed.query)

        if parsed.path == '/healthz':
            self._send_text(200, 'ok')
        elif parsed.path == '/render':
            self.handle_render(query)
        elif parsed.path == '/proxy':
            self.handle_proxy(query)
        elif parsed.path.startswith('/files/'):
            self.handle_files(parsed.path)
        else:
            self.handle_static(parsed.path)

    def do_POST(self):
        parsed = urlparse(self.path)
        if parsed.path == '/package':
            self.handle_package()
        elif parsed.path == '/upload':
            self.handle_upload()
        else:
            self._send_text(404, 'Not found')

    # --- Обробники ---

    def handle_render(self, query):
        file_url = query.get('url', [''])[0]
        if not file_url:
            self._send_text(400, 'Missing url param')
            return
        try:
            file_url = validate_url(file_url)
        except InputError:
            self._send_text(400, 'Invalid url')
            return

        workdir_id, workdir = create_workdir(self.server.tmp_root)
        self.server.register_files(workdir_id, workdir)
        try:
            input_path = os.path.join(workdir, filename_from_url(file_url))
            download_file(file_url, input_path, transport=self.server.transport)
            pdf_path = ensure_pdf(input_path, workdir)
        except ScormKitError as e:
            self._send_error_for('Error processing file', e)
            return

        self._send_json(200, {'pdf': self._public_url(f"/files/{workdir_id}/{os.path.basename(pdf_path)}")})

    def handle_upload(self):
        try:
            body = self._read_json()
            file_name = safe_filename(body.get('file_name'), 'upload')
            try:
                content = base64.b64decode(body.get('file_content') or '', validate=True)
            except (binascii.Error, ValueError) as e:
                raise InputError("Invalid Base64 file") from e
            if not content:
                raise InputError("No file uploaded")
            if len(content) > self.server.max_upload_bytes:
                raise PayloadTooLarge("Файл перевищує допустимий розмір")
        except InputError as e:
            self._send_error_for("Upload/convert error", e)
            return

        workdir_id, workdir = create_workdir(self.server.tmp_root)
        self.server.register_files(workdir_id, workdir)
        try:
            input_path = os.path.join(workdir, file_name)
            with open(input_path, 'wb') as f:
                f.write(content)
            pdf_path = ensure_pdf(input_path, workdir)
        except ScormKitError as e:
            self._send_error_for('Upload/convert error', e)
            return

        self._send_json(200, {'pdf': self._public_url(f"/files/{workdir_id}/{os.path.basename(pdf_path)}")})

    def handle_proxy(self, query):
        target = query.get('url', [''])[0]
        if not target:
            self._send_text(400, 'Missing url')
            return
        try:
            target = validate_url(target)
        except InputError:
            self._send_text(400, 'Invalid url')
            return

        whitelist = self.server.proxy_whitelist
        if whitelist is not None and (urlparse(target).hostname or '').lower() not in whitelist:
            self._send_text(403, 'Host not allowed')
            return

        headers_sent = False
        try:
            with httpx.Client(transport=self.server.transport, timeout=settings.DOWNLOAD_TIMEOUT,
                              follow_redirects=True) as client:
                with client.stream('GET', target) as upstream:
                    if not upstream.is_success:
                        self._send_text(502, f"Upstream returned {upstream.status_code}")
                        return
                    self.send_response(200)
                    # httpx віддає розпаковане тіло: без Content-Length і Content-Encoding
                    content_type = upstream.headers.get('content-type')
                    if content_type:
                        self.send_header('Content-Type', content_type)
                    self._send_cors()
                    self.end_headers()
                    headers_sent = True
                    self.close_connection = True
                    for chunk in upstream.iter_bytes(CHUNK_SIZE):
                        self.wfile.write(chunk)
        except httpx.HTTPError as e:
            print(f"Proxy error: {e}")
            if headers_sent:
                # відповідь уже почалася - лише обриваємо з'єднання
                self.close_connection = True
            else:
                self._send_text(500, f"Proxy error: {e}")

    def handle_package(self):
        try:
            body = self._read_json()
            # лише http(s): локальні шляхи сервера недоступні клієнтам
            pdf_url = validate_url(body.get('pdfUrl'))
            staged = self.server.assembler.stage(pdf_url, body.get('config'))
        except ScormKitError as e:
            self._send_error_for('Package generation error', e)
            return

        try:
            self.send_response(200)
            self.send_header('Content-Type', 'application/zip')
            self.send_header('Content-Disposition', 'attachment; filename="scorm_package.zip"')
            self._send_cors()
            self.end_headers()
            self.server.assembler.stream(staged, self.wfile)
        except OSError as e:
            # заголовки вже надіслано - лише обриваємо з'єднання
            print(f"Package streaming error: {e}")
            self.close_connection = True
        finally:
            self.server.assembler.release(staged)

    def handle_files(self, path):
        parts = path.split('/')
        # ['', 'files', id, name]
        if len(parts) != 4:
            self._send_text(404, 'Not found')
            return
        workdir_id, name = parts[2], unquote(parts[3])
        workdir = self.server.lookup_files(workdir_id)
        if workdir is None or not name or name.startswith('.') or name != safe_filename(name, ''):
            self._send_text(404, 'Not found')
            return
        file_path = os.path.join(workdir, name)
        if not os.path.isfile(file_path):
            self._send_text(404, 'Not found')
            return
        self._send_file(file_path)

    def handle_static(self, path):
        rel_path = unquote(path).lstrip("/") or "player.html"
        static_root = os.path.abspath(self.server.static_dir)
        file_path = os.path.abspath(os.path.join(static_root, *rel_path.split('/')))
        if os.path.commonpath([static_root, file_path]) != static_root or not os.path.isfile(file_path):
            self._send_text(404, 'Not found')
            return
        self._send_file(file_path)


def serve(host='0.0.0.0', port=None):
    """Запускає сервер до Ctrl+C"""
    port = port or settings.PORT
    server = ScormKitServer((host, port))
    print(f"Server listening on http://localhost:{port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("Зупинка сервера...")
    finally:
        server.server_close()
