# -*- coding: utf-8 -*-
"""
Сесія переглядача PDF

Завантажує документ, показує сторінки з підгонкою під область перегляду,
реагує на навігацію та зміну розміру і зберігає прогрес у SCORM.

Стани: idle -> loading -> ready -> disposed. Невдале завантаження повертає
сесію в idle, після чого можна завантажити інший документ.
"""

from .documents import open_document
from .errors import RenderError, ViewerDisposedError
from .progress_codec import decode, encode, parse_location, progress_ratio
from .progress_store import LOCATION, SUSPEND_DATA, StandaloneStore, locate_store
from .renderer import PageRenderer, RasterSurface
from .settings import DEFAULT_VIEWPORT

IDLE = 'idle'
LOADING = 'loading'
READY = 'ready'
DISPOSED = 'disposed'


class ViewerSession:
    """
    Один переглядач PDF з власним документом, прогресом і сховищем

    Args:
        surface (RasterSurface): Поверхня для малювання сторінок
        store_locator (callable): Повертає сховище прогресу; за замовчуванням
            шукає SCORM API у вікні window
        opener (callable): Корутина, що відкриває документ за URL
        viewport (tuple): Початковий розмір області перегляду
        window: Вікно, з якого починається пошук SCORM API
        sequence_locked (bool): Заборонити перехід далі першої непереглянутої
            сторінки
    """

    def __init__(self, surface=None, store_locator=None, opener=None, viewport=DEFAULT_VIEWPORT,
                 window=None, sequence_locked=False):
        self.surface = surface if surface is not None else RasterSurface()
        self._locate_store = store_locator or (lambda: locate_store(window))
        self._open = opener or open_document
        self.viewport_size = tuple(viewport)
        self.sequence_locked = sequence_locked

        self.renderer = PageRenderer(self.surface, self._get_viewport, self._persist_progress)
        self.store = StandaloneStore()
        self.document = None
        self.state = IDLE
        self.last_loaded_url = None
        self._load_generation = 0
        self._reset_state()

    def _get_viewport(self):
        return self.viewport_size

    def _reset_state(self):
        self.current_page = 1
        self.page_count = 0
        self.visited = []
        self._pending_render = False
        self._pending_reset = False

    def _ensure_alive(self):
        if self.state == DISPOSED:
            raise ViewerDisposedError("Переглядач уже закрито")

    def _destroy_document(self):
        document, self.document = self.document, None
        self.renderer.detach()
        if document is None:
            return
        try:
            document.close()
        except Exception as e:
            print(f"Не вдалося закрити документ: {e}")

    def _init_store(self):
        try:
            store = self._locate_store()
            store.initialize()
            return store
        except Exception as e:
            print(f"SCORM недоступний, працюємо автономно: {e}")
            return StandaloneStore()

    def _restore_progress(self):
        try:
            suspend = self.store.get(SUSPEND_DATA)
            location = self.store.get(LOCATION)
        except Exception as e:
            print(f"Не вдалося прочитати прогрес: {e}")
            suspend, location = '', ''

        self.visited = decode(suspend, self.page_count)
        self.current_page = parse_location(location, self.page_count)

    def _persist_progress(self, visited, page_number):
        try:
            self.store.set(SUSPEND_DATA, encode(visited))
            self.store.set(LOCATION, str(page_number))
            self.store.commit()
        except Exception as e:
            print(f"Прогрес не збережено: {e}")

    async def start(self, url):
        """
        Завантажує PDF і показує першу (або збережену) сторінку

        Якщо під час завантаження почалося нове, результат цього відкидається:
        документ закривається, а сесію займає лише останній запит.

        Args:
            url (str): URL або шлях до PDF

        Returns:
            bool: True, якщо документ показано; False, якщо завантаження
            замінене новішим

        Raises:
            InputError: Порожній або некоректний URL, непридатний PDF
            UpstreamFetchError: Документ не вдалося завантажити
        """
        self._ensure_alive()
        print(f"Підготовка до завантаження PDF: {url}")

        self._load_generation += 1
        generation = self._load_generation

        self._destroy_document()
        self.surface.clear()
        self._reset_state()
        self.state = LOADING
        self.last_loaded_url = url

        try:
            self.store = self._init_store()
            document = await self._open(url)
        except Exception:
            if generation != self._load_generation:
                raise
            if self.state == LOADING:
                self.state = IDLE
            self.surface.clear()
            self.surface.show_message("Failed to load PDF.")
            raise

        if self.state == DISPOSED:
            document.close()
            raise ViewerDisposedError("Переглядач закрито під час завантаження")

        if generation != self._load_generation:
            print(f"Завантаження {url} замінене новішим, документ закрито")
            document.close()
            return False

        self.document = document
        self.page_count = document.page_count
        self.visited = [False] * self.page_count
        self._restore_progress()
        self.renderer.attach(document, self.visited)
        self.state = READY

        await self._render(self.current_page)
        print(f"PDF завантажено. Сторінок: {self.page_count}")
        return True

    start_viewer_with_pdf = start

    async def _render(self, page_number):
        if self.renderer.busy:
            self._pending_render = True
            return False

        rendered = await self._render_once(page_number)

        # запити, що надійшли під час рендеру, виконуються після нього
        while self._pending_render and self.state == READY and not self.renderer.busy:
            self._pending_render = False
            if self._pending_reset:
                self._pending_reset = False
                self.renderer.reset()
            rendered = await self._render_once(self.current_page) or rendered
        return rendered

    async def _render_once(self, page_number):
        try:
            return await self.renderer.render_page(page_number)
        except RenderError as e:
            print(f"Помилка рендеру: {e}")
            return False

    async def next(self):
        self._ensure_alive()
        if self.document is None or self.current_page >= self.page_count:
            return False
        self.current_page += 1
        return await self._render(self.current_page)

    async def prev(self):
        self._ensure_alive()
        if self.document is None or self.current_page <= 1:
            return False
        self.current_page -= 1
        return await self._render(self.current_page)

    def furthest_allowed_page(self):
        """Найдальша сторінка, на яку можна перейти при послідовному режимі"""
        if not self.sequence_locked:
            return self.page_count
        for index, visited in enumerate(self.visited):
            if not visited:
                return index + 1
        return self.page_count

    async def go_to(self, page_number):
        self._ensure_alive()
        if self.document is None:
            return False
        page_number = max(1, min(int(page_number), self.page_count))
        if page_number > self.furthest_allowed_page():
            print(f"Сторінка {page_number} ще недоступна: перегляд лише послідовний")
            return False
        if page_number == self.current_page:
            return False
        self.current_page = page_number
        return await self._render(self.current_page)

    async def resize(self, width, height):
        """Перемальовує поточну сторінку під новий розмір області перегляду"""
        self._ensure_alive()
        self.viewport_size = (width, height)
        if self.document is None:
            return False

        if self.renderer.busy:
            self._pending_reset = True
            self._pending_render = True
            return False

        self.renderer.reset()
        return await self._render(self.current_page)

    def dispose(self):
        """Зберігає прогрес, завершує сесію SCORM і звільняє документ"""
        if self.state == DISPOSED:
            return
        self.state = DISPOSED
        try:
            self.store.commit()
            self.store.terminate()
        except Exception as e:
            print(f"Не вдалося завершити сесію SCORM: {e}")
        self._destroy_document()
        self.surface.clear()

    def get_state(self):
        return {
            'state': self.state,
            'pdf_loaded': self.document is not None,
            'last_pdf_url': self.last_loaded_url,
            'total_pages': self.page_count,
            'current_page': self.current_page,
            'visited': encode(self.visited),
            'progress': progress_ratio(self.visited),
        }
