# -*- coding: utf-8 -*-
"""
Кодування прогресу перегляду для cmi.suspend_data

Кожна сторінка - один символ '1' (переглянута) або '0', у порядку сторінок.
"""


def encode(bitmap):
    return ''.join('1' if visited else '0' for visited in bitmap)


def decode(data, page_count):
    """
    Відновлює список переглянутих сторінок зі збереженого рядка

    Рядок іншої довжини (документ змінився між сесіями) або з іншими
    символами вважається відсутнім прогресом.

    Args:
        data (str): Збережений рядок
        page_count (int): Кількість сторінок документа

    Returns:
        list: Список bool довжиною page_count
    """
    empty = [False] * page_count
    if not isinstance(data, str) or len(data) != page_count:
        return empty
    if any(char not in '01' for char in data):
        return empty
    return [char == '1' for char in data]


def parse_location(value, page_count):
    """Номер останньої сторінки (1-based) або 1, якщо значення непридатне"""
    try:
        page = int(str(value).strip(), 10)
    except (TypeError, ValueError):
        return 1
    if 1 <= page <= page_count:
        return page
    return 1


def progress_ratio(bitmap):
    if not bitmap:
        return 0.0
    return sum(1 for visited in bitmap if visited) / len(bitmap)
