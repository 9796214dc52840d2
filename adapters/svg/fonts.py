from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

HAND_FONT_FAMILY = "Virgil"
MONO_FONT_FAMILY = "Cascadia"
HAND_FONT_STACK = "Virgil, Segoe Print, Comic Sans MS, cursive"
MONO_FONT_STACK = "Cascadia, Cascadia Code, monospace"
FONT_FILES = {
    HAND_FONT_FAMILY: "Virgil.woff2",
    MONO_FONT_FAMILY: "Cascadia.woff2",
}


@dataclass(frozen=True)
class FontResources:
    """Font files keyed by CSS family name."""

    fonts: dict[str, bytes] = field(default_factory=dict)

    @classmethod
    def from_directory(cls, directory: Path) -> FontResources:
        fonts: dict[str, bytes] = {}
        for family, filename in FONT_FILES.items():
            path = directory / filename
            if not path.is_file():
                logger.warning("Font file not found, %s will not be embedded: %s", family, path)
                continue
            fonts[family] = path.read_bytes()
        return cls(fonts=fonts)

    def font_face_css(self) -> str:
        rules = []
        for family, payload in self.fonts.items():
            encoded = base64.b64encode(payload).decode("ascii")
            rules.append(
                "@font-face {\n"
                f"  font-family: '{family}';\n"
                f"  src: url(data:font/woff2;base64,{encoded}) format('woff2');\n"
                "  font-weight: normal; font-style: normal;\n"
                "}"
            )
        return "\n".join(rules)
