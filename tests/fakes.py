"""Допоміжні фейки та генератори PDF для тестів"""
import asyncio

import fitz


def make_pdf_bytes(pages=3, width=600, height=800):
    doc = fitz.open()
    for number in range(1, pages + 1):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"Page {number}")
    data = doc.tobytes()
    doc.close()
    return data


class FakeImage:
    def __init__(self, page_number, scale):
        self.page_number = page_number
        self.scale = scale

    def tobytes(self, fmt='png'):
        return b'\x89PNG fake'


class FakePage:
    def __init__(self, document, number):
        self.document = document
        self.number = number
        self.width = document.page_width
        self.height = document.page_height

    async def render(self, scale):
        if self.document.gate is not None:
            await self.document.gate.wait()
        if self.number in self.document.fail_pages:
            raise RuntimeError("broken page")
        self.document.renders.append((self.number, scale))
        return FakeImage(self.number, scale)


class FakeDocument:
    """Документ, рендер якого можна затримати через gate (asyncio.Event)"""

    def __init__(self, page_count=5, page_width=600, page_height=800, fail_pages=(), source='doc.pdf'):
        self.page_count = page_count
        self.page_width = page_width
        self.page_height = page_height
        self.fail_pages = set(fail_pages)
        self.source = source
        self.gate = None
        self.renders = []
        self.close_calls = 0

    async def get_page(self, number):
        return FakePage(self, number)

    def close(self):
        self.close_calls += 1


def fake_opener(*documents):
    """Корутина-відкривач, що повертає документи по черзі"""
    queue = list(documents)
    opened = []

    async def opener(url):
        document = queue.pop(0)
        opened.append(url)
        return document

    opener.opened = opened
    return opener


def run(coro):
    return asyncio.run(coro)
