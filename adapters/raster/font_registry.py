from __future__ import annotations

import ctypes
import ctypes.util
import hashlib
import logging
import re
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from adapters.filesystem.json_utils import write_bytes_atomic

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path(tempfile.gettempdir()) / "sketch-render-fonts"
FONT_SUFFIXES = {b"wOF2": ".woff2", b"wOFF": ".woff", b"OTTO": ".otf"}

_UNSAFE_NAME = re.compile(r"[^A-Za-z0-9_-]+")


def font_suffix(payload: bytes) -> str:
    return FONT_SUFFIXES.get(payload[:4], ".ttf")


def load_fontconfig() -> Any | None:
    name = ctypes.util.find_library("fontconfig")
    if name is None:
        return None
    library = ctypes.CDLL(name)
    library.FcConfigAppFontAddFile.argtypes = [ctypes.c_void_p, ctypes.c_char_p]
    library.FcConfigAppFontAddFile.restype = ctypes.c_int
    return library


class FontRegistry:
    """Adds font bytes to the process fontconfig setup as application fonts.

    cairo looks fonts up by family name through fontconfig, so a registered
    Virgil file is what ``font-family="Virgil"`` resolves to. Each distinct
    payload is written to ``cache_dir`` and registered once per process.
    """

    def __init__(self, cache_dir: Path | None = None, library: Any | None = None) -> None:
        self.cache_dir = cache_dir or DEFAULT_CACHE_DIR
        self._library = library
        self._load_attempted = library is not None
        self._registered: dict[str, Path] = {}

    def register(self, fonts: Mapping[str, bytes]) -> list[Path]:
        if not fonts:
            return []
        library = self._fontconfig()
        if library is None:
            return []
        paths: list[Path] = []
        for family, payload in fonts.items():
            digest = hashlib.sha256(payload).hexdigest()[:16]
            known = self._registered.get(digest)
            if known is not None:
                paths.append(known)
                continue
            filename = f"{_UNSAFE_NAME.sub('-', family)}-{digest}{font_suffix(payload)}"
            path = self.cache_dir / filename
            if not path.exists():
                write_bytes_atomic(path, payload)
            if not library.FcConfigAppFontAddFile(None, str(path).encode()):
                logger.warning("fontconfig rejected font %s: %s", family, path)
                continue
            logger.debug("Registered font %s from %s", family, path)
            self._registered[digest] = path
            paths.append(path)
        return paths

    def _fontconfig(self) -> Any | None:
        if not self._load_attempted:
            self._load_attempted = True
            self._library = load_fontconfig()
            if self._library is None:
                logger.warning("fontconfig not found; PNG text falls back to system fonts")
        return self._library
