# -*- coding: utf-8 -*-
"""Завантаження PDF-документів для переглядача"""

import asyncio
import os
from urllib.parse import urlparse

import fitz  # PyMuPDF
import httpx

from .errors import InputError, UpstreamFetchError
from .settings import DOWNLOAD_TIMEOUT


class PdfPage:
    """Сторінка документа з розмірами при масштабі 1"""

    def __init__(self, page):
        self._page = page
        self.number = page.number + 1
        self.width = page.rect.width
        self.height = page.rect.height

    def _render(self, scale):
        matrix = fitz.Matrix(scale, scale)
        return self._page.get_pixmap(matrix=matrix, alpha=False)

    async def render(self, scale):
        return await asyncio.to_thread(self._render, scale)


class PdfDocument:
    """
    Відкритий PDF-документ

    Args:
        doc (fitz.Document): Документ PyMuPDF
        source (str): URL або шлях, з якого його завантажено
    """

    def __init__(self, doc, source):
        self._doc = doc
        self.source = source
        self.page_count = doc.page_count

    @property
    def closed(self):
        return self._doc is None

    def _load_page(self, number):
        if self._doc is None:
            raise ValueError("Документ уже закрито")
        if not 1 <= number <= self.page_count:
            raise IndexError(f"Сторінки {number} немає в документі")
        return PdfPage(self._doc.load_page(number - 1))

    async def get_page(self, number):
        return await asyncio.to_thread(self._load_page, number)

    def close(self):
        doc, self._doc = self._doc, None
        if doc is not None:
            doc.close()


def validate_document_url(url):
    if not isinstance(url, str) or not url.strip():
        raise InputError("Не вказано URL PDF-документа")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme in ('http', 'https'):
        if not parsed.netloc:
            raise InputError(f"Некоректний URL: {url}")
    elif parsed.scheme and len(parsed.scheme) > 1 and parsed.scheme != 'file':
        # однолітерна схема - це диск Windows
        raise InputError(f"Непідтримувана схема URL: {parsed.scheme}")
    return url


async def _fetch_bytes(url, transport=None, timeout=DOWNLOAD_TIMEOUT):
    try:
        async with httpx.AsyncClient(transport=transport, timeout=timeout, follow_redirects=True) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        raise UpstreamFetchError(f"Не вдалося завантажити PDF: {e}", url=url) from e

    if response.status_code < 200 or response.status_code >= 300:
        raise UpstreamFetchError(
            f"Не вдалося завантажити PDF: {response.status_code}",
            status_code=response.status_code,
            url=url,
        )
    return response.content


def _open_fitz(source, data=None):
    try:
        if data is not None:
            return fitz.open(stream=data, filetype='pdf')
        return fitz.open(source, filetype='pdf')
    except (RuntimeError, ValueError) as e:
        raise InputError(f"Не вдалося відкрити PDF {source}: {e}") from e


async def open_document(url, transport=None):
    """
    Завантажує та розбирає PDF-документ

    Args:
        url (str): http(s) URL або локальний шлях до PDF
        transport: Необов'язковий транспорт httpx (для тестів)

    Returns:
        PdfDocument: Відкритий документ
    """
    url = validate_document_url(url)
    parsed = urlparse(url)

    if parsed.scheme in ('http', 'https'):
        data = await _fetch_bytes(url, transport=transport)
        doc = await asyncio.to_thread(_open_fitz, url, data)
    else:
        path = parsed.path if parsed.scheme == 'file' else url
        if not os.path.exists(path):
            raise InputError(f"Файл '{path}' не знайдено")
        doc = await asyncio.to_thread(_open_fitz, path)

    if doc.page_count < 1:
        doc.close()
        raise InputError(f"PDF {url} не містить сторінок")
    return PdfDocument(doc, url)
