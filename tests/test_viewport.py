"""Тести підбору масштабу сторінки"""
import math

import pytest

from scorm_kit.viewport import fit_scale, scaled_size


class TestFitScale:

    @pytest.mark.parametrize("page, viewport, expected", [
        ((600, 800), (1200, 800), 1.0),
        ((600, 800), (300, 800), 0.5),
        ((600, 800), (1200, 1600), 2.0),
        ((1000, 500), (500, 500), 0.5),
        ((612, 792), (1280, 720), 720 / 792),
    ])
    def test_returns_smaller_ratio(self, page, viewport, expected):
        assert fit_scale(page[0], page[1], viewport[0], viewport[1]) == pytest.approx(expected)

    @pytest.mark.parametrize("args", [
        (600, 800, 0, 800),
        (600, 800, 800, 0),
        (600, 800, -100, 500),
        (0, 800, 500, 500),
        (600, 0, 500, 500),
        (600, 800, math.inf, math.inf),
        (600, 800, math.nan, 500),
        (600, 800, None, 500),
    ])
    def test_degenerate_input_falls_back_to_one(self, args):
        assert fit_scale(*args) == 1.0

    def test_scaled_size_truncates(self):
        assert scaled_size(600, 800, 0.333) == (199, 266)

    def test_scaled_size_never_zero(self):
        assert scaled_size(1, 1, 0.01) == (1, 1)
