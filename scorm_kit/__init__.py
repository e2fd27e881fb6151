# -*- coding: utf-8 -*-
"""
SCORM-KIT: PDF-плеєр у SCORM-пакетах

Конвертує офісні документи в PDF, збирає SCORM-пакет з переглядачем PDF
та відстежує прогрес перегляду сторінок.
"""

from .errors import (
    ScormKitError,
    InputError,
    UpstreamFetchError,
    ConversionError,
    RenderError,
    PersistenceError,
    ViewerDisposedError,
)
from .config_js import RuntimeConfig, render_config_js
from .manifest import build_manifest
from .packager import PackageAssembler, StagedPackage
from .viewer import ViewerSession

__version__ = "0.3.0"

__all__ = [
    "ScormKitError",
    "InputError",
    "UpstreamFetchError",
    "ConversionError",
    "RenderError",
    "PersistenceError",
    "ViewerDisposedError",
    "RuntimeConfig",
    "render_config_js",
    "build_manifest",
    "PackageAssembler",
    "StagedPackage",
    "ViewerSession",
]
