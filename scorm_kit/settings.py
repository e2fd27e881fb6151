# -*- coding: utf-8 -*-
"""
Налаштування SCORM-KIT

Значення за замовчуванням можна перевизначити змінними середовища.
"""

import os

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

# Файли переглядача, що копіюються в кожен пакет
STATIC_DIR = os.environ.get('SCORM_KIT_STATIC', os.path.join(PACKAGE_DIR, 'static'))

# Коренева директорія для тимчасових робочих директорій
TMP_ROOT = os.environ.get('SCORM_KIT_TMP', os.path.join(os.getcwd(), 'tmp'))

PORT = int(os.environ.get('SCORM_KIT_PORT', os.environ.get('PORT', '3000')))

SOFFICE_BINARY = os.environ.get('SOFFICE_BINARY', 'soffice')
CONVERSION_TIMEOUT = int(os.environ.get('SCORM_KIT_CONVERSION_TIMEOUT', '300'))

DOWNLOAD_TIMEOUT = float(os.environ.get('SCORM_KIT_DOWNLOAD_TIMEOUT', '60'))

MAX_UPLOAD_BYTES = int(os.environ.get('SCORM_KIT_MAX_UPLOAD', str(200 * 1024 * 1024)))

# Час життя робочих директорій (секунди)
RENDER_RETENTION_SECONDS = int(os.environ.get('SCORM_KIT_RENDER_RETENTION', str(30 * 60)))
PACKAGE_RETENTION_SECONDS = int(os.environ.get('SCORM_KIT_PACKAGE_RETENTION', str(5 * 60)))


def _parse_whitelist(value):
    if not value:
        return None
    hosts = [host.strip().lower() for host in value.split(',') if host.strip()]
    return hosts or None


# None - дозволено всі хости
PROXY_WHITELIST = _parse_whitelist(os.environ.get('SCORM_KIT_PROXY_WHITELIST'))

# Розмір області перегляду за замовчуванням (px)
DEFAULT_VIEWPORT = (1280, 720)
