# -*- coding: utf-8 -*-
"""Завантаження файлів із зовнішніх джерел"""

import os
import re
from urllib.parse import unquote, urlparse

import httpx

from .errors import InputError, UpstreamFetchError
from .settings import DOWNLOAD_TIMEOUT

CHUNK_SIZE = 64 * 1024


def validate_url(url):
    """Перевіряє, що url - абсолютний http(s) URL"""
    if not isinstance(url, str) or not url.strip():
        raise InputError("Не вказано URL")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme.lower() not in ('http', 'https') or not parsed.netloc:
        raise InputError(f"Некоректний URL: {url}")
    return url


def safe_filename(name, default='file'):
    """Прибирає з імені файлу шляхи та символи, недопустимі у файловій системі"""
    name = os.path.basename((name or '').replace('\\', '/'))
    name = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '', name).strip().strip('.')
    if not name or name in ('.', '..'):
        return default
    return name[:255]


def filename_from_url(url, default='presentation.pptx'):
    path = unquote(urlparse(url).path)
    return safe_filename(os.path.basename(path), default)


def download_file(url, destination, transport=None, timeout=DOWNLOAD_TIMEOUT):
    """
    Потоково завантажує файл за URL на диск

    Args:
        url (str): http(s) URL
        destination (str): Шлях до файлу призначення
        transport: Необов'язковий транспорт httpx (для тестів)
        timeout (float): Таймаут запиту в секундах

    Returns:
        str: Шлях до завантаженого файлу

    Raises:
        UpstreamFetchError: Сервер повернув не 2xx або з'єднання не вдалося
    """
    url = validate_url(url)
    print(f"Завантаження {url}")
    try:
        with httpx.Client(transport=transport, timeout=timeout, follow_redirects=True) as client:
            with client.stream('GET', url) as response:
                if not response.is_success:
                    raise UpstreamFetchError(
                        f"Не вдалося завантажити файл: {response.status_code}",
                        status_code=response.status_code,
                        url=url,
                    )
                with open(destination, 'wb') as f:
                    for chunk in response.iter_bytes(CHUNK_SIZE):
                        f.write(chunk)
    except httpx.HTTPError as e:
        raise UpstreamFetchError(f"Не вдалося завантажити файл: {e}", url=url) from e

    return destination
