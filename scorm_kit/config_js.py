# -*- coding: utf-8 -*-
"""
Config.js для переглядача в SCORM-пакеті

Набір полів фіксований: невідомі ключі ігноруються, відсутні отримують
значення за замовчуванням, некоректні відхиляються як InputError.
"""

import json
from dataclasses import dataclass
from typing import Optional

from .errors import InputError

CONFIG_FILENAME = 'Config.js'
NAV_POSITIONS = ('left', 'center', 'right')

# Стилі плеєра (не налаштовуються користувачем)
STYLE_CONSTANTS = (
    ('fontFamily', "system-ui, -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif"),
    ('fontSize', '14px'),
    ('fontColor', '#222222'),
    ('bodyBgColor', '#ffffff'),
    ('headerBgColor', '#555555'),
    ('headerTextColor', '#ffffff'),
    ('footerBgColor', '#555555'),
    ('footerTextColor', '#ffffff'),
    ('buttonBgColor', '#777777'),
    ('buttonPrimaryBgColor', '#007bff'),
    ('buttonTextColor', '#ffffff'),
    ('progressBarColor', '#00ff00'),
)

_TRUE_STRINGS = ('true', '1', 'yes', 'on')
_FALSE_STRINGS = ('false', '0', 'no', 'off')

# ключ у запиті -> атрибут RuntimeConfig
_FIELD_ALIASES = {
    'title': 'title',
    'filename': 'filename',
    'sidebarDefaultOpen': 'sidebar_default_open',
    'sidebar_default_open': 'sidebar_default_open',
    'slideSequenceLocked': 'slide_sequence_locked',
    'slide_sequence_locked': 'slide_sequence_locked',
    'navPosition': 'nav_position',
    'nav_position': 'nav_position',
}


def coerce_bool(name, value):
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise InputError(f"Поле {name} має бути булевим, отримано: {value!r}")


@dataclass(frozen=True)
class RuntimeConfig:
    """Налаштування відображення плеєра"""

    title: str = ''
    filename: Optional[str] = None
    sidebar_default_open: bool = True
    slide_sequence_locked: bool = True
    nav_position: str = 'right'

    def __post_init__(self):
        if not isinstance(self.title, str):
            raise InputError("Поле title має бути рядком")
        if self.filename is not None and not isinstance(self.filename, str):
            raise InputError("Поле filename має бути рядком")
        if self.nav_position not in NAV_POSITIONS:
            raise InputError(
                f"Поле navPosition має бути одним із {', '.join(NAV_POSITIONS)}, отримано: {self.nav_position!r}"
            )

    @classmethod
    def from_mapping(cls, data):
        """
        Створює конфігурацію з даних запиту (camelCase або snake_case)

        Args:
            data (dict): Дані від клієнта або None

        Returns:
            RuntimeConfig: Конфігурація з застосованими значеннями за замовчуванням
        """
        if data is None:
            return cls()
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            raise InputError("Конфігурація має бути об'єктом")

        values = {}
        for key, value in data.items():
            field = _FIELD_ALIASES.get(key)
            if field is None or value is None:
                continue
            if field in ('sidebar_default_open', 'slide_sequence_locked'):
                value = coerce_bool(key, value)
            elif field == 'nav_position' and isinstance(value, str):
                value = value.strip().lower()
            values[field] = value
        return cls(**values)


def _js_string(value):
    # </script> усередині рядка закрив би тег
    return json.dumps(value, ensure_ascii=False).replace('</', '<\\/')


def render_config_js(config, pdf_filename):
    """
    Генерує вміст Config.js

    Args:
        config (RuntimeConfig): Налаштування плеєра
        pdf_filename (str): Ім'я PDF у папці data/

    Returns:
        str: JavaScript з об'єктом Config
    """
    lines = [
        '// Config.js',
        'var Config = {',
        '    // Назва документа у верхній панелі',
        f'    title: {_js_string(config.title)},',
        '',
        '    // Посилання на PPTX (задається LMS під час інтеграції)',
        '    pptUrl: null,',
        '',
        '    // PDF у папці data/',
        f'    filename: {_js_string(pdf_filename)},',
        '',
        '    // Оформлення',
    ]
    for name, value in STYLE_CONSTANTS:
        lines.append(f'    {name}: {_js_string(value)},')

    lines.extend([
        '',
        '    // Бічна панель відкрита за замовчуванням',
        f'    sidebarDefaultOpen: {"true" if config.sidebar_default_open else "false"},',
        '',
        '    // Лише послідовний перегляд сторінок',
        f'    slideSequenceLocked: {"true" if config.slide_sequence_locked else "false"},',
        '',
        "    // Позиція кнопок навігації: 'left' | 'center' | 'right'",
        f'    navPosition: {_js_string(config.nav_position)}',
        '};',
        '',
    ])
    return '\n'.join(lines)
