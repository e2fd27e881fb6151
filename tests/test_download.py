"""Тести завантаження файлів"""
import httpx
import pytest

from scorm_kit.download import download_file, filename_from_url, safe_filename, validate_url
from scorm_kit.errors import InputError, UpstreamFetchError


class TestValidateUrl:

    @pytest.mark.parametrize('url', [None, '', 'file:///etc/passwd', 'example.com/a.pdf', 'http://'])
    def test_invalid(self, url):
        with pytest.raises(InputError):
            validate_url(url)

    def test_valid(self):
        assert validate_url(' HTTPS://example.com/a.pdf ') == 'HTTPS://example.com/a.pdf'


class TestFilenames:

    @pytest.mark.parametrize('name, expected', [
        ('report.pdf', 'report.pdf'),
        ('../../etc/passwd', 'passwd'),
        ('C:\\temp\\slides.pptx', 'slides.pptx'),
        ('a<b>:c.pptx', 'abc.pptx'),
        ('..', 'file'),
        ('', 'file'),
        (None, 'file'),
    ])
    def test_safe_filename(self, name, expected):
        assert safe_filename(name) == expected

    def test_filename_from_url(self):
        assert filename_from_url('https://x.com/files/My%20Deck.pptx?v=2') == 'My Deck.pptx'
        assert filename_from_url('https://x.com/') == 'presentation.pptx'


class TestDownloadFile:

    def test_writes_body(self, pdf_transport, pdf_bytes, tmp_path):
        destination = str(tmp_path / 'a.pdf')

        assert download_file('https://x.com/a.pdf', destination, transport=pdf_transport) == destination
        assert (tmp_path / 'a.pdf').read_bytes() == pdf_bytes

    def test_error_status(self, pdf_transport, tmp_path):
        with pytest.raises(UpstreamFetchError) as excinfo:
            download_file('https://x.com/missing.pdf', str(tmp_path / 'a.pdf'), transport=pdf_transport)

        assert excinfo.value.status_code == 404
        assert excinfo.value.url == 'https://x.com/missing.pdf'
        assert not (tmp_path / 'a.pdf').exists()

    def test_connection_error(self, tmp_path):
        def handler(request):
            raise httpx.ConnectError('refused', request=request)

        with pytest.raises(UpstreamFetchError) as excinfo:
            download_file('https://x.com/a.pdf', str(tmp_path / 'a.pdf'),
                          transport=httpx.MockTransport(handler))
        assert excinfo.value.status_code is None
