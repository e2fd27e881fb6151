"""Тести PageRenderer"""
import asyncio
from unittest.mock import Mock

import pytest

from scorm_kit.errors import RenderError
from scorm_kit.renderer import NO_PAGE, PageRenderer, RasterSurface
from tests.fakes import FakeDocument, FakeImage, run


def make_renderer(document=None, viewport=(1200, 800), on_rendered=None):
    surface = RasterSurface()
    renderer = PageRenderer(surface, lambda: viewport, on_rendered)
    if document is not None:
        renderer.attach(document, [False] * document.page_count)
    return renderer


class TestPageRenderer:

    def test_no_document_is_noop(self):
        renderer = make_renderer()
        assert run(renderer.render_page(1)) is False
        assert renderer.current_index == NO_PAGE

    def test_render_fits_page_and_marks_visited(self):
        document = FakeDocument(page_count=3)
        callback = Mock()
        renderer = make_renderer(document, viewport=(300, 800), on_rendered=callback)

        assert run(renderer.render_page(2)) is True

        assert document.renders == [(2, 0.5)]
        assert (renderer.surface.width, renderer.surface.height) == (300, 400)
        assert isinstance(renderer.surface.image, FakeImage)
        assert renderer.visited == [False, True, False]
        assert renderer.busy is False
        callback.assert_called_once_with([False, True, False], 2)

    def test_same_page_twice_renders_once(self):
        document = FakeDocument(page_count=3)
        renderer = make_renderer(document)

        run(renderer.render_page(1))
        assert run(renderer.render_page(1)) is False
        assert renderer.render_count == 1
        assert len(document.renders) == 1

    def test_reset_allows_rerender(self):
        document = FakeDocument(page_count=3)
        renderer = make_renderer(document)

        run(renderer.render_page(1))
        renderer.reset()
        run(renderer.render_page(1))
        assert renderer.render_count == 2

    def test_request_while_busy_is_dropped(self):
        document = FakeDocument(page_count=3)
        renderer = make_renderer(document)

        async def scenario():
            document.gate = asyncio.Event()
            first = asyncio.create_task(renderer.render_page(1))
            while not renderer.busy:
                await asyncio.sleep(0)
            # номер сторінки зайнятий одразу, до завершення рендеру
            assert renderer.current_index == 1
            dropped = await renderer.render_page(2)
            document.gate.set()
            return dropped, await first

        dropped, rendered = run(scenario())
        assert dropped is False
        assert rendered is True
        assert document.renders == [(1, 1.0)]

    def test_failure_does_not_mark_visited(self):
        document = FakeDocument(page_count=2, fail_pages={2})
        callback = Mock()
        renderer = make_renderer(document, on_rendered=callback)

        with pytest.raises(RenderError) as exc_info:
            run(renderer.render_page(2))

        assert exc_info.value.page_number == 2
        assert renderer.busy is False
        assert renderer.visited == [False, False]
        assert renderer.surface.message == "Failed to load page."
        callback.assert_not_called()

    def test_stale_result_is_discarded(self):
        old = FakeDocument(page_count=2)
        new = FakeDocument(page_count=4)
        callback = Mock()
        renderer = make_renderer(old, on_rendered=callback)

        async def scenario():
            old.gate = asyncio.Event()
            task = asyncio.create_task(renderer.render_page(1))
            while not renderer.busy:
                await asyncio.sleep(0)
            renderer.attach(new, [False] * 4)
            old.gate.set()
            return await task

        assert run(scenario()) is False
        assert renderer.visited == [False] * 4
        assert renderer.surface.image is None
        callback.assert_not_called()


class TestRasterSurface:

    def test_clear_and_message(self):
        surface = RasterSurface()
        surface.paint(FakeImage(1, 1.0))
        surface.show_message("Failed to load PDF.")
        assert surface.message == "Failed to load PDF."
        surface.clear()
        assert surface.blank
        assert surface.to_png() is None
