"""Спільні фікстури для тестів SCORM-KIT"""
import gzip

import httpx
import pytest

from scorm_kit import settings
from scorm_kit.progress_store import MemoryStore
from tests.fakes import make_pdf_bytes


class BrokenStream(httpx.SyncByteStream):
    """Тіло, що обривається після першого фрагмента"""

    def __iter__(self):
        yield b'%PDF-partial'
        raise httpx.ReadError('connection reset')


@pytest.fixture
def pdf_bytes():
    return make_pdf_bytes(3)


@pytest.fixture
def pdf_file(tmp_path, pdf_bytes):
    path = tmp_path / 'lesson.pdf'
    path.write_bytes(pdf_bytes)
    return str(path)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def tmp_root(tmp_path):
    root = tmp_path / 'tmp'
    root.mkdir()
    return str(root)


@pytest.fixture
def assets_dir():
    return settings.STATIC_DIR


@pytest.fixture
def pdf_transport(pdf_bytes):
    """
    Транспорт httpx:
    /missing.pdf -> 404, /gzipped.pdf -> PDF стиснутий gzip,
    /broken.pdf -> обрив посеред тіла, решта -> PDF
    """
    requests = []

    def handler(request):
        requests.append(request)
        path = request.url.path
        if path.endswith('missing.pdf'):
            return httpx.Response(404, text='not found')
        if path.endswith('gzipped.pdf'):
            return httpx.Response(200, content=gzip.compress(pdf_bytes),
                                  headers={'Content-Type': 'application/pdf', 'Content-Encoding': 'gzip'})
        if path.endswith('broken.pdf'):
            return httpx.Response(200, stream=BrokenStream(), headers={'Content-Type': 'application/pdf'})
        return httpx.Response(200, content=pdf_bytes, headers={'Content-Type': 'application/pdf'})

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport
