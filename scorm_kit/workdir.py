# -*- coding: utf-8 -*-
"""
Тимчасові робочі директорії

Кожен запит працює у власній директорії з унікальним ім'ям. Видалення
відкладене таймером і не гарантоване: якщо процес завершиться раніше,
директорія залишиться на диску.
"""

import os
import shutil
import threading
from uuid import uuid4


def create_workdir(root, prefix=''):
    """
    Створює унікальну робочу директорію

    Args:
        root (str): Коренева тимчасова директорія
        prefix (str): Префікс імені (наприклад 'pkg_')

    Returns:
        tuple: (ідентифікатор, шлях до директорії)
    """
    workdir_id = f"{prefix}{uuid4()}"
    path = os.path.join(root, workdir_id)
    os.makedirs(path, exist_ok=False)
    return workdir_id, path


def remove_workdir(path):
    if os.path.isdir(path):
        shutil.rmtree(path, ignore_errors=True)
        print(f"Тимчасову директорію видалено: {path}")


def schedule_cleanup(path, delay, action=remove_workdir):
    """Видаляє директорію через delay секунд у фоновому потоці"""
    timer = threading.Timer(delay, action, args=(path,))
    timer.daemon = True
    timer.start()
    return timer
