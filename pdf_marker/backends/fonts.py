from pathlib import Path
import logging
from typing import Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from pdf_marker.core.errors import ResourceUnavailableError
from pdf_marker.core.style import DEFAULT_FONT_NAME

logger = logging.getLogger(__name__)

_SYMBOLIC_FONTS = ("Symbol", "ZapfDingbats")


class FontResource:
    """A font that is loaded once, up front, and checked again at commit time.

    A failed load does not raise; it is remembered and reported as
    ResourceUnavailableError when a commit asks for the font.
    """

    def __init__(self, font_name: str = DEFAULT_FONT_NAME, error: Optional[str] = None):
        self.font_name = font_name
        self.error = error

    @classmethod
    def load(cls, font_path, font_name: Optional[str] = None) -> "FontResource":
        path = Path(font_path).expanduser()
        name = font_name or path.stem
        try:
            pdfmetrics.registerFont(TTFont(name, str(path)))
        except (OSError, TTFError) as e:
            logger.error(f"Failed to load font {path}: {e}")
            return cls(name, error=f"Font '{path}' could not be loaded: {e}")
        logger.info(f"Loaded marker font {name} from {path}")
        return cls(name)

    @property
    def available(self) -> bool:
        if self.error:
            return False
        return self.font_name in pdfmetrics.standardFonts or self.font_name in pdfmetrics.getRegisteredFontNames()

    def require(self, text: Optional[str] = None) -> str:
        """Return the font name to draw with.

        Raises ResourceUnavailableError if the font never loaded, or if it has
        no glyphs for some character of `text`.
        """
        if self.error:
            raise ResourceUnavailableError(self.error)
        if not self.available:
            raise ResourceUnavailableError(f"Font '{self.font_name}' is not registered")
        if text:
            self._check_covers(text)
        return self.font_name

    def _check_covers(self, text: str) -> None:
        if self.font_name in pdfmetrics.standardFonts:
            # standard Type 1 fonts draw through WinAnsiEncoding
            if self.font_name in _SYMBOLIC_FONTS:
                return
            try:
                text.encode("cp1252")
            except UnicodeEncodeError as e:
                raise ResourceUnavailableError(
                    f"Font '{self.font_name}' cannot draw {text!r}; load a TrueType font with --font"
                ) from e
            return
        face = getattr(pdfmetrics.getFont(self.font_name), "face", None)
        glyphs = getattr(face, "charToGlyph", None)
        if glyphs is None:
            return
        missing = sorted({ch for ch in text if not ch.isspace() and ord(ch) not in glyphs})
        if missing:
            raise ResourceUnavailableError(
                f"Font '{self.font_name}' has no glyphs for {''.join(missing)!r}"
            )

    def __repr__(self) -> str:
        state = f"error={self.error!r}" if self.error else "ok"
        return f"FontResource({self.font_name!r}, {state})"


BUILTIN_FONT = FontResource(DEFAULT_FONT_NAME)
