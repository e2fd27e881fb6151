# -*- coding: utf-8 -*-
"""Підбір масштабу сторінки під розмір області перегляду"""

import math


def fit_scale(page_width, page_height, viewport_width, viewport_height):
    """
    Обчислює масштаб, за якого сторінка повністю вміщується в область перегляду

    Args:
        page_width (float): Ширина сторінки при масштабі 1
        page_height (float): Висота сторінки при масштабі 1
        viewport_width (float): Ширина області перегляду
        viewport_height (float): Висота області перегляду

    Returns:
        float: min(vw / pw, vh / ph) або 1.0 для виродженої області
    """
    try:
        scale = min(viewport_width / page_width, viewport_height / page_height)
    except (ZeroDivisionError, TypeError):
        return 1.0

    if not math.isfinite(scale) or scale <= 0:
        return 1.0
    return float(scale)


def scaled_size(width, height, scale):
    # canvas відкидає дробову частину
    return max(1, int(width * scale)), max(1, int(height * scale))
