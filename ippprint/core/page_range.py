# -*- coding: utf-8 -*-
# Parser del mini-lenguaje de rangos de páginas
# Convierte "1-5", ":5", "5:", "3", "1,3,5" en un rangeOfInteger IPP

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ippprint.core.errors import InvalidPageRange
from ippprint.core.options import IPP_INTEGER_MAX

logger = logging.getLogger(__name__)

# Cota superior que representa "hasta el final del documento".
# El tipo rangeOfInteger de IPP no tiene valor abierto, así que se envía este número.
END_OF_DOCUMENT = 999

_INTEGER_RE = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class PageRange:
    lower: int
    upper: int

    def __post_init__(self):
        if self.lower < 1 or self.upper < self.lower:
            raise ValueError(f"invalid page range [{self.lower}, {self.upper}]")

    @property
    def is_open_ended(self) -> bool:
        return self.upper == END_OF_DOCUMENT

    def as_tuple(self):
        return (self.lower, self.upper)

    def __str__(self):
        if self.is_open_ended:
            return f"{self.lower}-end"
        return f"{self.lower}-{self.upper}"


ALL_PAGES = PageRange(1, END_OF_DOCUMENT)


def is_all_pages(text: Optional[str]) -> bool:
    return text is None or text.strip().lower() in ("", "all")


def _positive_int(text: str) -> Optional[int]:
    text = text.strip()
    if not _INTEGER_RE.fullmatch(text):
        return None
    value = int(text)
    return value if 0 < value <= IPP_INTEGER_MAX else None


def _parse(text: str) -> Optional[PageRange]:
    # Página única: "3"
    if not any(sep in text for sep in "-:,"):
        page = _positive_int(text)
        if page is not None:
            return PageRange(page, page)

    # Rango con guion: "1-5"
    if "-" in text:
        parts = text.split("-")
        if len(parts) == 2:
            lower, upper = _positive_int(parts[0]), _positive_int(parts[1])
            if lower is not None and upper is not None and lower <= upper:
                return PageRange(lower, upper)

    # Rango con dos puntos: ":5" (primeras 5) o "5:" (desde la 5 al final)
    if ":" in text:
        left, _, right = text.partition(":")
        if left == "":
            upper = _positive_int(right)
            if upper is not None:
                return PageRange(1, upper)
        if right == "":
            lower = _positive_int(left)
            if lower is not None:
                return PageRange(lower, max(lower, END_OF_DOCUMENT))

    # Lista con comas: solo se conserva la primera página.
    # IPP no puede expresar páginas no contiguas en un único rango.
    if "," in text:
        page = _positive_int(text.split(",")[0])
        if page is not None:
            return PageRange(page, page)

    return None


def parse_page_range(text: Optional[str], strict: bool = False) -> PageRange:
    text = (text or "").strip()
    result = _parse(text)
    if result is not None:
        if "," in text:
            logger.debug(f"Page list '{text}' reduced to first page {result.lower}")
        return result

    if strict and not is_all_pages(text):
        raise InvalidPageRange(text)
    if not is_all_pages(text):
        logger.debug(f"Unparsable page range '{text}', printing all pages")
    return ALL_PAGES
