# -*- coding: utf-8 -*-
"""
Збирання SCORM-пакету з переглядачем PDF

Пакет збирається у власній робочій директорії: файли переглядача, PDF у
data/content.pdf, Config.js, index_lms.html та imsmanifest.xml. Потім
директорія потоково пакується в ZIP прямо у відповідь клієнту.
"""

import os
import shutil
import zipfile
from dataclasses import dataclass, field
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .config_js import CONFIG_FILENAME, RuntimeConfig, render_config_js
from .download import download_file, validate_url
from .errors import InputError, ScormKitError
from .manifest import MANIFEST_FILENAME, build_manifest
from .settings import PACKAGE_RETENTION_SECONDS, STATIC_DIR, TMP_ROOT
from .workdir import create_workdir, schedule_cleanup

PLAYER_FILE = 'player.html'
LAUNCH_FILE = 'index_lms.html'
DATA_DIR = 'data'
PDF_FILENAME = 'content.pdf'
DEFAULT_TITLE = 'SCORM Package'

# Файли та папки переглядача, що копіюються в пакет (якщо існують)
VIEWER_ASSETS = (PLAYER_FILE, LAUNCH_FILE, 'css', 'js')

# Необов'язкові файли, що додаються до маніфесту, якщо вони є в пакеті
OPTIONAL_RESOURCES = (
    'css/styles.css',
    'js/pdf.min.js',
    'js/pdf.worker.min.js',
    'js/player-viewer.js',
)


@dataclass
class StagedPackage:
    """Підготовлена до пакування робоча директорія"""

    package_id: str
    workdir: str
    title: str
    resources: list = field(default_factory=list)

    @property
    def pdf_path(self):
        return os.path.join(self.workdir, DATA_DIR, PDF_FILENAME)

    @property
    def manifest_path(self):
        return os.path.join(self.workdir, MANIFEST_FILENAME)


def list_files(directory):
    """Відносні шляхи (через '/') усіх файлів директорії у стабільному порядку"""
    result = []
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for file in sorted(files):
            rel_path = os.path.relpath(os.path.join(root, file), directory)
            result.append(rel_path.replace(os.sep, '/'))
    return result


def create_fallback_launch_page(pdf_filename, title):
    """
    Створює мінімальну сторінку запуску для LMS з плеєром в iframe

    Args:
        pdf_filename (str): Ім'я PDF у папці data/
        title (str): Заголовок сторінки

    Returns:
        str: HTML-вміст
    """
    soup = BeautifulSoup(
        '<!doctype html><html><head></head><body style="margin:0"></body></html>',
        'html.parser'
    )
    soup.head.append(soup.new_tag('meta', charset='utf-8'))
    title_tag = soup.new_tag('title')
    title_tag.string = title
    soup.head.append(title_tag)
    iframe = soup.new_tag(
        'iframe',
        src=f"{PLAYER_FILE}?pdf={DATA_DIR}/{pdf_filename}",
        style='width:100%;height:100vh;border:0;'
    )
    soup.body.append(iframe)
    return str(soup)


class PackageAssembler:
    """
    Збирач SCORM-пакетів

    Args:
        assets_dir (str): Директорія з файлами переглядача
        tmp_root (str): Коренева директорія для робочих директорій
        retention (int): Через скільки секунд видаляти робочу директорію
        transport: Необов'язковий транспорт httpx (для тестів)
        cleanup (callable): Планувальник видалення (path, delay)
        scorm_version (str): Версія SCORM маніфесту
    """

    def __init__(self, assets_dir=STATIC_DIR, tmp_root=TMP_ROOT, retention=PACKAGE_RETENTION_SECONDS,
                 transport=None, cleanup=schedule_cleanup, scorm_version='1.2'):
        self.assets_dir = assets_dir
        self.tmp_root = tmp_root
        self.retention = retention
        self.transport = transport
        self.cleanup = cleanup
        self.scorm_version = scorm_version

    def _check_source(self, pdf_source):
        if not isinstance(pdf_source, str) or not pdf_source.strip():
            raise InputError("Не вказано pdfUrl")
        pdf_source = pdf_source.strip()
        if urlparse(pdf_source).scheme.lower() in ('http', 'https'):
            return validate_url(pdf_source)
        if not os.path.isfile(pdf_source):
            raise InputError(f"PDF-файл '{pdf_source}' не знайдено")
        return pdf_source

    def _check_assets(self):
        if not os.path.isfile(os.path.join(self.assets_dir, PLAYER_FILE)):
            raise ScormKitError(f"У директорії {self.assets_dir} немає {PLAYER_FILE}")

    def _copy_assets(self, workdir):
        for name in VIEWER_ASSETS:
            src = os.path.join(self.assets_dir, name)
            dst = os.path.join(workdir, name)
            if os.path.isdir(src):
                shutil.copytree(src, dst, dirs_exist_ok=True)
            elif os.path.isfile(src):
                shutil.copy2(src, dst)

    def _fetch_pdf(self, pdf_source, destination):
        if urlparse(pdf_source).scheme.lower() in ('http', 'https'):
            download_file(pdf_source, destination, transport=self.transport)
        else:
            shutil.copyfile(pdf_source, destination)

    def collect_resources(self, workdir):
        """
        Формує список файлів ресурсу для маніфесту

        Обов'язкові файли йдуть першими, далі необов'язкові файли переглядача,
        що реально є в директорії, далі решта скопійованих файлів.
        """
        resources = [PLAYER_FILE, LAUNCH_FILE, CONFIG_FILENAME, f"{DATA_DIR}/{PDF_FILENAME}"]
        for rel_path in OPTIONAL_RESOURCES:
            if os.path.isfile(os.path.join(workdir, *rel_path.split('/'))):
                resources.append(rel_path)
        for rel_path in list_files(workdir):
            if rel_path != MANIFEST_FILENAME and rel_path not in resources:
                resources.append(rel_path)
        return resources

    def stage(self, pdf_source, config=None):
        """
        Готує робочу директорію пакету

        Args:
            pdf_source (str): http(s) URL або локальний шлях до PDF
            config: RuntimeConfig або словник з налаштуваннями

        Returns:
            StagedPackage: Готова до пакування директорія

        Raises:
            InputError: Некоректні параметри (директорія не створюється)
            UpstreamFetchError: PDF не вдалося завантажити
            ScormKitError: У файлах переглядача немає player.html
        """
        config = RuntimeConfig.from_mapping(config)
        pdf_source = self._check_source(pdf_source)
        self._check_assets()

        os.makedirs(self.tmp_root, exist_ok=True)
        package_id, workdir = create_workdir(self.tmp_root, 'pkg_')
        print(f"Створення SCORM-пакету {package_id}")

        try:
            # 1) файли переглядача
            self._copy_assets(workdir)

            # 2) data/content.pdf
            data_dir = os.path.join(workdir, DATA_DIR)
            os.makedirs(data_dir, exist_ok=True)
            self._fetch_pdf(pdf_source, os.path.join(data_dir, PDF_FILENAME))

            # 3) Config.js
            with open(os.path.join(workdir, CONFIG_FILENAME), 'w', encoding='utf-8') as f:
                f.write(render_config_js(config, PDF_FILENAME))

            title = config.title or DEFAULT_TITLE

            # 4) запасна сторінка запуску
            launch_path = os.path.join(workdir, LAUNCH_FILE)
            if not os.path.exists(launch_path):
                with open(launch_path, 'w', encoding='utf-8') as f:
                    f.write(create_fallback_launch_page(PDF_FILENAME, title))

            # 5) маніфест
            resources = self.collect_resources(workdir)
            manifest_xml = build_manifest(package_id, title, LAUNCH_FILE, resources, self.scorm_version)
            with open(os.path.join(workdir, MANIFEST_FILENAME), 'w', encoding='utf-8') as f:
                f.write(manifest_xml)
        except Exception:
            self.release_path(workdir)
            raise

        print(f"Пакет {package_id} підготовлено, файлів: {len(resources)}")
        return StagedPackage(package_id, workdir, title, resources)

    def stream(self, staged, fileobj):
        """Пише ZIP-архів робочої директорії у потік (можна непозиційований)"""
        with zipfile.ZipFile(fileobj, 'w', zipfile.ZIP_DEFLATED, compresslevel=9) as zipf:
            for rel_path in list_files(staged.workdir):
                zipf.write(os.path.join(staged.workdir, *rel_path.split('/')), rel_path)

    def release_path(self, workdir):
        self.cleanup(workdir, self.retention)

    def release(self, staged):
        self.release_path(staged.workdir)

    def build(self, pdf_source, config, fileobj):
        """
        Збирає пакет і пише ZIP у fileobj

        Якщо підготовка не вдалася, у fileobj нічого не пишеться.
        """
        staged = self.stage(pdf_source, config)
        try:
            self.stream(staged, fileobj)
        finally:
            self.release(staged)
        return staged

    def build_to_file(self, pdf_source, config, output_path):
        staged = self.stage(pdf_source, config)
        try:
            with open(output_path, 'wb') as f:
                self.stream(staged, f)
        finally:
            self.release(staged)
        print(f"SCORM-пакет успішно створено: {output_path}")
        return staged
