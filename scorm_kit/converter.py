# -*- coding: utf-8 -*-
"""
Конвертація офісних документів у PDF через LibreOffice

Кожен виклик запускає окремий процес soffice і чекає на його завершення.
"""

import os
import subprocess

from .errors import ConversionError, InputError
from .settings import CONVERSION_TIMEOUT, SOFFICE_BINARY

OFFICE_EXTENSIONS = ('.pptx', '.ppt', '.docx', '.doc', '.odp', '.odt', '.xlsx', '.xls', '.rtf')


def is_pdf(path):
    return os.path.splitext(path)[1].lower() == '.pdf'


def convert_to_pdf(input_path, out_dir, soffice=SOFFICE_BINARY, timeout=CONVERSION_TIMEOUT):
    """
    Конвертує документ у PDF за допомогою LibreOffice

    Args:
        input_path (str): Шлях до вхідного документа
        out_dir (str): Директорія для PDF
        soffice (str): Виконуваний файл LibreOffice
        timeout (int): Максимальний час конвертації в секундах

    Returns:
        str: Шлях до створеного PDF

    Raises:
        ConversionError: soffice завершився з помилкою або PDF не з'явився
    """
    cmd = [soffice, '--headless', '--convert-to', 'pdf', '--outdir', out_dir, input_path]
    print(f"Конвертація {os.path.basename(input_path)} в PDF...")

    try:
        process = subprocess.run(cmd, stdin=subprocess.DEVNULL, stdout=subprocess.PIPE,
                                 stderr=subprocess.PIPE, text=True, timeout=timeout)
    except FileNotFoundError as e:
        raise ConversionError(f"Не знайдено {soffice}. Встановіть LibreOffice") from e
    except subprocess.TimeoutExpired as e:
        raise ConversionError(f"Конвертація перевищила {timeout} с", stderr=str(e.stderr or '')) from e

    if process.returncode != 0:
        raise ConversionError(
            f"soffice exit code {process.returncode} - {process.stderr}",
            stderr=process.stderr,
            returncode=process.returncode,
        )

    pdf_name = os.path.splitext(os.path.basename(input_path))[0] + '.pdf'
    pdf_path = os.path.join(out_dir, pdf_name)
    if not os.path.exists(pdf_path):
        raise ConversionError(f"soffice не створив {pdf_name}", stderr=process.stderr,
                              returncode=process.returncode)
    return pdf_path


def ensure_pdf(input_path, out_dir, **kwargs):
    """PDF повертається як є, офісні документи конвертуються"""
    if is_pdf(input_path):
        return input_path
    if os.path.splitext(input_path)[1].lower() not in OFFICE_EXTENSIONS:
        raise InputError(f"Непідтримуваний тип файлу: {os.path.basename(input_path)}")
    return convert_to_pdf(input_path, out_dir, **kwargs)
