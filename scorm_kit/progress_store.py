# -*- coding: utf-8 -*-
"""
Сховища прогресу перегляду

Переглядач працює або автономно (без LMS), або через SCORM API,
знайдене у вікнах-батьках. Жоден виклик сховища не кидає винятків:
якщо LMS недоступна, прогрес просто не зберігається.
"""

from .errors import PersistenceError

SUSPEND_DATA = 'suspend_data'
LOCATION = 'location'

# Логічний ключ -> (елемент SCORM 1.2, елемент SCORM 2004)
CMI_ELEMENTS = {
    SUSPEND_DATA: ('cmi.suspend_data', 'cmi.suspend_data'),
    LOCATION: ('cmi.core.lesson_location', 'cmi.location'),
}

# Назви методів API для кожної версії SCORM
API_METHODS = {
    '1.2': {
        'initialize': 'LMSInitialize',
        'get': 'LMSGetValue',
        'set': 'LMSSetValue',
        'commit': 'LMSCommit',
        'terminate': 'LMSFinish',
    },
    '2004': {
        'initialize': 'Initialize',
        'get': 'GetValue',
        'set': 'SetValue',
        'commit': 'Commit',
        'terminate': 'Terminate',
    },
}

MAX_PARENT_ATTEMPTS = 500


class StandaloneStore:
    """Сховище без LMS: всі операції нічого не роблять"""

    available = False

    def initialize(self):
        pass

    def get(self, key):
        return ''

    def set(self, key, value):
        pass

    def commit(self):
        pass

    def terminate(self):
        pass


class MemoryStore:
    """Сховище у словнику (Streamlit session_state, тести)"""

    available = True

    def __init__(self, data=None):
        self.data = data if data is not None else {}
        self.commits = 0
        self.initialized = False
        self.terminated = False

    def initialize(self):
        self.initialized = True
        self.terminated = False

    def get(self, key):
        return str(self.data.get(key, ''))

    def set(self, key, value):
        self.data[key] = str(value)

    def commit(self):
        self.commits += 1

    def terminate(self):
        self.terminated = True


class ScormApiStore:
    """
    Адаптер до об'єкта SCORM API, наданого LMS

    Args:
        api: Об'єкт API (window.API або window.API_1484_11)
        version (str): '1.2' або '2004'
    """

    available = True

    def __init__(self, api, version='1.2'):
        if version not in API_METHODS:
            raise ValueError(f"Непідтримувана версія SCORM: {version}")
        self.api = api
        self.version = version

    def _element(self, key):
        if key in CMI_ELEMENTS:
            v12, v2004 = CMI_ELEMENTS[key]
            return v12 if self.version == '1.2' else v2004
        return key

    def _call(self, operation, *args):
        method_name = API_METHODS[self.version][operation]
        method = getattr(self.api, method_name, None)
        if method is None:
            raise PersistenceError(f"SCORM API не має методу {method_name}")
        try:
            return method(*args)
        except Exception as e:
            raise PersistenceError(f"{method_name}: {e}") from e

    def _safe(self, operation, *args, default=None):
        try:
            return self._call(operation, *args)
        except PersistenceError as e:
            print(f"SCORM: помилку збереження прогресу проігноровано ({e})")
            return default

    def initialize(self):
        self._safe('initialize', '')

    def get(self, key):
        value = self._safe('get', self._element(key), default='')
        return str(value) if value else ''

    def set(self, key, value):
        self._safe('set', self._element(key), str(value))

    def commit(self):
        self._safe('commit', '')

    def terminate(self):
        self._safe('terminate', '')


def find_scorm_api(window, max_attempts=MAX_PARENT_ATTEMPTS):
    """
    Шукає SCORM API, піднімаючись по ланцюжку батьківських вікон

    Args:
        window: Об'єкт вікна з атрибутом parent
        max_attempts (int): Максимальна кількість кроків угору

    Returns:
        tuple: (api, version) або (None, None)
    """
    if window is None:
        return None, None

    try:
        attempts = 0
        while (getattr(window, 'API', None) is None
               and getattr(window, 'API_1484_11', None) is None
               and attempts < max_attempts):
            parent = getattr(window, 'parent', None)
            if parent is None or parent is window:
                break
            attempts += 1
            window = parent

        if getattr(window, 'API', None) is not None:
            return window.API, '1.2'
        if getattr(window, 'API_1484_11', None) is not None:
            return window.API_1484_11, '2004'
    except Exception as e:
        # доступ до чужого вікна може бути заборонений
        print(f"SCORM: пошук API перервано ({e})")
    return None, None


def locate_store(window=None):
    """ScormApiStore, якщо LMS знайдено, інакше StandaloneStore"""
    api, version = find_scorm_api(window)
    if api is None:
        return StandaloneStore()
    return ScormApiStore(api, version)
