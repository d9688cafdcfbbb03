# -*- coding: utf-8 -*-
# Opciones de impresión y sobrescrituras
# Registro inmutable consumido por la ruta de envío de trabajos

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Union

from ippprint.core.errors import InvalidCopies, InvalidQuality

# 3=borrador, 4=normal, 5=mejor
VALID_QUALITIES = (3, 4, 5)
QUALITY_LABELS = {3: "draft", 4: "normal", 5: "best"}

# Mayor valor de un integer IPP (entero con signo de 32 bits)
IPP_INTEGER_MAX = 2**31 - 1


def validate_quality(quality: int) -> int:
    if quality not in VALID_QUALITIES:
        raise InvalidQuality(quality)
    return quality


@dataclass(frozen=True)
class PrintOptions:
    paper_size: str
    tray: str
    media_type: str
    quality: int
    page_range: str = "all"
    copies: int = 1

    def __post_init__(self):
        validate_quality(self.quality)
        if not 1 <= self.copies <= IPP_INTEGER_MAX:
            raise InvalidCopies(self.copies)

    @property
    def quality_label(self) -> str:
        return QUALITY_LABELS[self.quality]


# Campos opcionales; None, "" y 0 se consideran ausentes
@dataclass(frozen=True)
class ProfileOverrides:
    page_range: Optional[str] = None
    quality: Optional[int] = None
    paper_size: Optional[str] = None
    tray: Optional[str] = None
    media_type: Optional[str] = None
    copies: Optional[int] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ProfileOverrides":
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise TypeError(f"unknown override field(s): {', '.join(sorted(unknown))}")
        return cls(**values)

    def present(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) not in (None, "", 0)
        }


OverridesLike = Union[ProfileOverrides, Mapping[str, Any], None]


def apply_overrides(options: PrintOptions, overrides: OverridesLike) -> PrintOptions:
    if overrides is None:
        return options
    if not isinstance(overrides, ProfileOverrides):
        overrides = ProfileOverrides.from_mapping(overrides)

    changes = overrides.present()
    if "quality" in changes:
        validate_quality(changes["quality"])
    if not changes:
        return options
    return replace(options, **changes)


# Opciones por defecto para fotos 4x6 sin bordes
def default_print_options() -> PrintOptions:
    return PrintOptions(
        paper_size="4x6.Borderless",
        tray="Photo",
        media_type="photographic-glossy",
        quality=5,
    )


# Opciones usadas para imprimir el reporte de estado
def report_print_options() -> PrintOptions:
    return PrintOptions(
        paper_size="A4",
        tray="Main",
        media_type="stationery",
        quality=4,
    )
