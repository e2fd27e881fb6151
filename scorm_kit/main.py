#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import argparse
import os
import sys
import tempfile
from urllib.parse import urlparse

from .config_js import NAV_POSITIONS, RuntimeConfig
from .converter import OFFICE_EXTENSIONS, ensure_pdf
from .errors import ScormKitError
from .packager import PackageAssembler
from .workdir import remove_workdir
from . import settings


def build_parser():
    parser = argparse.ArgumentParser(description='Конвертер документів у SCORM-пакети з PDF-плеєром')
    parser.add_argument('input_file', nargs='?',
                        help='Шлях до документа (PDF, PPTX, DOCX ...) або http(s) URL PDF-файлу')
    parser.add_argument('--output', '-o', help='Шлях до вихідного SCORM-пакету (.zip)')
    parser.add_argument('--title', '-t', help='Назва курсу (за замовчуванням - назва вхідного файлу)')
    parser.add_argument('--scorm-version', '-v', choices=['1.2', '2004'], default='1.2',
                        help='Версія SCORM маніфесту (1.2 або 2004)')
    parser.add_argument('--sidebar-closed', action='store_true',
                        help='Бічна панель плеєра закрита за замовчуванням')
    parser.add_argument('--unlocked', action='store_true',
                        help='Дозволити перегляд сторінок не по порядку')
    parser.add_argument('--nav-position', choices=NAV_POSITIONS, default='right',
                        help='Позиція кнопок навігації')
    parser.add_argument('--serve', action='store_true', help='Запустити HTTP-сервер')
    parser.add_argument('--host', default='0.0.0.0', help='Адреса сервера')
    parser.add_argument('--port', '-p', type=int, default=settings.PORT, help='Порт сервера')
    return parser


def is_url(value):
    return urlparse(value).scheme.lower() in ('http', 'https')


def default_output(input_file):
    if is_url(input_file):
        name = os.path.splitext(os.path.basename(urlparse(input_file).path))[0] or 'scorm_package'
        return f"{name}_scorm.zip"
    output_dir = os.path.dirname(input_file) or '.'
    output_name = os.path.splitext(os.path.basename(input_file))[0]
    return os.path.join(output_dir, f"{output_name}_scorm.zip")


def default_title(input_file):
    path = urlparse(input_file).path if is_url(input_file) else input_file
    return os.path.splitext(os.path.basename(path))[0]


def run_package(args):
    """
    Збирає SCORM-пакет з документа або URL

    Args:
        args (argparse.Namespace): Аргументи командного рядка

    Returns:
        int: Код виходу
    """
    config = RuntimeConfig(
        title=args.title or default_title(args.input_file),
        sidebar_default_open=not args.sidebar_closed,
        slide_sequence_locked=not args.unlocked,
        nav_position=args.nav_position,
    )
    output = args.output or default_output(args.input_file)
    # робоча директорія видаляється одразу після збирання
    assembler = PackageAssembler(tmp_root=settings.TMP_ROOT, scorm_version=args.scorm_version,
                                 cleanup=lambda path, delay: remove_workdir(path))

    if is_url(args.input_file):
        assembler.build_to_file(args.input_file, config, output)
        return 0

    if not os.path.exists(args.input_file):
        print(f"Помилка: Файл '{args.input_file}' не знайдено")
        return 1

    # Офісні документи спочатку конвертуються в PDF
    with tempfile.TemporaryDirectory() as temp_dir:
        pdf_path = ensure_pdf(args.input_file, temp_dir)
        assembler.build_to_file(pdf_path, config, output)
    return 0


def main(argv=None):
    """
    Головна функція командного рядка SCORM-KIT
    """
    args = build_parser().parse_args(argv)

    if args.serve:
        from .server import serve
        serve(args.host, args.port)
        return 0

    # Якщо шлях до файлу не вказано через аргументи, запитуємо його
    if not args.input_file:
        print("=== SCORM-KIT ===")
        print("Підтримувані формати: PDF, " + ', '.join(ext[1:].upper() for ext in OFFICE_EXTENSIONS))
        args.input_file = input("Введіть шлях до файлу або URL PDF: ").strip()
        if not args.input_file:
            print("Операцію скасовано.")
            return 0

    print("\nПочинаю конвертацію...")
    try:
        return run_package(args)
    except ScormKitError as e:
        print(f"\nПомилка при створенні SCORM-пакету: {e}")
        stderr = getattr(e, 'stderr', '')
        if stderr:
            print(stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
