# -*- coding: utf-8 -*-
"""Винятки SCORM-KIT"""


class ScormKitError(Exception):
    """Базовий виняток для всіх помилок пакету"""


class InputError(ScormKitError):
    """Некоректні вхідні дані: URL, параметри конфігурації, файл"""


class UpstreamFetchError(ScormKitError):
    """Не вдалося завантажити документ із зовнішнього джерела"""

    def __init__(self, message, status_code=None, url=None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ConversionError(ScormKitError):
    """Зовнішній конвертер (LibreOffice) завершився з помилкою"""

    def __init__(self, message, stderr="", returncode=None):
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode


class RenderError(ScormKitError):
    """Помилка отримання або растеризації сторінки"""

    def __init__(self, message, page_number=None):
        super().__init__(message)
        self.page_number = page_number


class PersistenceError(ScormKitError):
    """Помилка читання/запису прогресу в LMS (ніколи не пробивається назовні)"""


class ViewerDisposedError(ScormKitError):
    """Виклик переглядача після його закриття"""
