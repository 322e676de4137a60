import logging
import os
from typing import Iterable, List, Optional, Sequence, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.pdfmetrics import registerFontFamily
from reportlab.pdfbase.ttfonts import TTFError, TTFont

BUILTIN_REGULAR = "Helvetica"
BUILTIN_BOLD = "Helvetica-Bold"

# Font names read by both the measurer and the PDF backend. They point at a
# Unicode TrueType family once one is registered, else at built-in Helvetica.
FONT_REGULAR_NAME = BUILTIN_REGULAR
FONT_BOLD_NAME = BUILTIN_BOLD

# (family, regular file names, bold file names), in order of preference
FONT_CANDIDATES: Sequence[Tuple[str, Sequence[str], Sequence[str]]] = (
    ("Arial", ("arial.ttf", "ARIAL.TTF"), ("arialbd.ttf", "ARIALBD.TTF")),
    ("SegoeUI", ("segoeui.ttf", "SEGOEUI.TTF"), ("segoeuib.ttf", "SEGOEUIB.TTF")),
    ("Verdana", ("verdana.ttf", "VERDANA.TTF"), ("verdanab.ttf", "VERDANAB.TTF")),
    ("DejaVuSans", ("DejaVuSans.ttf",), ("DejaVuSans-Bold.ttf",)),
    ("NotoSans", ("NotoSans-Regular.ttf",), ("NotoSans-Bold.ttf",)),
)

SYSTEM_FONT_DIRS = (
    "/usr/share/fonts/truetype/dejavu",
    "/usr/share/fonts/truetype/noto",
    "/usr/share/fonts/TTF",
)

logger = logging.getLogger(__name__)


def _font_dirs(extra_dirs: Optional[Iterable[str]] = None) -> List[str]:
    """Directories searched for font files; ``extra_dirs`` win over system ones."""
    dirs = list(extra_dirs or [])
    dirs.append(os.path.join(os.environ.get("WINDIR", r"C:\\Windows"), "Fonts"))
    dirs.extend(SYSTEM_FONT_DIRS)
    dirs.append(os.path.abspath("."))
    return dirs


def _find_file(dirs: Iterable[str], names: Iterable[str]) -> Optional[str]:
    for directory in dirs:
        for name in names:
            path = os.path.join(directory, name)
            if os.path.isfile(path):
                return path
    return None


def _register_family(family: str, regular_path: str, bold_path: Optional[str]) -> Tuple[str, str]:
    """Register a TrueType family and return its (regular, bold) font names.

    Without a bold file the regular face doubles as bold.
    """
    pdfmetrics.registerFont(TTFont(family, regular_path))
    if not bold_path:
        return family, family
    bold = f"{family}-Bold"
    pdfmetrics.registerFont(TTFont(bold, bold_path))
    registerFontFamily(family, normal=family, bold=bold)
    return family, bold


def setup_unicode_fonts(extra_dirs: Optional[Iterable[str]] = None):
    """Best-effort registration of Unicode fonts so spell text with extended
    characters (e.g. "×" or "→") can be measured and drawn.

    Keeps Helvetica if no candidate family can be registered.
    """
    global FONT_REGULAR_NAME, FONT_BOLD_NAME
    dirs = _font_dirs(extra_dirs)
    for family, regular_files, bold_files in FONT_CANDIDATES:
        regular_path = _find_file(dirs, regular_files)
        if not regular_path:
            continue
        try:
            FONT_REGULAR_NAME, FONT_BOLD_NAME = _register_family(family, regular_path, _find_file(dirs, bold_files))
        except (TTFError, OSError) as exc:
            logger.debug("Could not register font %s from %s: %s", family, regular_path, exc)
            continue
        logger.debug("Using font family %s", family)
        return
    logger.debug("No TrueType font found; using Helvetica")


def use_builtin_fonts():
    """Reset the font names to the built-in Helvetica family."""
    global FONT_REGULAR_NAME, FONT_BOLD_NAME
    FONT_REGULAR_NAME, FONT_BOLD_NAME = BUILTIN_REGULAR, BUILTIN_BOLD
