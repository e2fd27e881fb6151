# -*- coding: utf-8 -*-
"""
Рендеринг сторінок PDF у растрову поверхню

PageRenderer малює одну сторінку за раз. Поки триває рендер, нові запити
відкидаються, а повторний запит тієї ж сторінки нічого не робить.
"""

from .errors import RenderError
from .viewport import fit_scale, scaled_size

NO_PAGE = -1


class RasterSurface:
    """Растрова поверхня (аналог canvas), на якій показується сторінка"""

    def __init__(self, width=0, height=0):
        self.width = width
        self.height = height
        self.image = None
        self.message = None

    def resize(self, width, height):
        self.width = width
        self.height = height

    def clear(self):
        self.image = None
        self.message = None

    def paint(self, image):
        self.image = image
        self.message = None

    def show_message(self, text):
        self.message = text

    @property
    def blank(self):
        return self.image is None and self.message is None

    def to_png(self):
        """PNG-байти поточного зображення або None"""
        if self.image is None:
            return None
        return self.image.tobytes('png')


class PageRenderer:
    """
    Рендерер сторінок із захистом від повторної та паралельної роботи

    Args:
        surface (RasterSurface): Поверхня для малювання
        viewport (callable): Повертає поточні (ширина, висота) області перегляду
        on_rendered (callable): Викликається з (visited, page_number) після
            успішного рендеру
    """

    def __init__(self, surface, viewport, on_rendered=None):
        self.surface = surface
        self.viewport = viewport
        self.on_rendered = on_rendered
        self.document = None
        self.visited = []
        self.current_index = NO_PAGE
        self.busy = False
        self.render_count = 0

    def attach(self, document, visited):
        self.document = document
        self.visited = visited
        self.current_index = NO_PAGE
        self.busy = False

    def detach(self):
        self.document = None
        self.visited = []
        self.current_index = NO_PAGE
        self.busy = False

    def reset(self):
        """Дозволяє повторно відрендерити поточну сторінку (зміна розміру)"""
        self.current_index = NO_PAGE

    async def render_page(self, page_number):
        """
        Рендерить сторінку з підгонкою під область перегляду

        Args:
            page_number (int): Номер сторінки (1-based)

        Returns:
            bool: True, якщо сторінку відрендерено; False, якщо запит
            відкинуто або результат застарів
        """
        if self.document is None or self.busy:
            return False
        if page_number == self.current_index:
            return False

        # позначаємо одразу, щоб не запускати той самий рендер ще раз
        self.current_index = page_number
        self.busy = True
        document = self.document

        try:
            page = await document.get_page(page_number)
            if document is not self.document:
                return False

            viewport_width, viewport_height = self.viewport()
            scale = fit_scale(page.width, page.height, viewport_width, viewport_height)
            width, height = scaled_size(page.width, page.height, scale)

            self.surface.resize(width, height)
            self.surface.clear()

            self.render_count += 1
            image = await page.render(scale)
        except Exception as e:
            if document is not self.document:
                return False
            self.busy = False
            self.current_index = NO_PAGE
            self.surface.show_message("Failed to load page.")
            raise RenderError(f"Помилка рендеру сторінки {page_number}: {e}", page_number) from e

        # документ замінили під час рендеру - результат відкидаємо
        if document is not self.document:
            return False

        self.surface.paint(image)
        self.busy = False
        if 0 <= page_number - 1 < len(self.visited):
            self.visited[page_number - 1] = True
        if self.on_rendered is not None:
            self.on_rendered(self.visited, page_number)
        return True
