# -*- coding: utf-8 -*-
# Presentación del estado de la impresora
# Texto para consola y reporte PDF de una página renderizado con Pillow

import logging
import platform
from datetime import datetime
from typing import Optional

import PIL
from PIL import Image, ImageColor, ImageDraw, ImageFont

from ippprint.config.settings import settings
from ippprint.printer.status import PrinterSnapshot

logger = logging.getLogger(__name__)

BAR_LENGTH = 20

# A4 a 150 DPI
REPORT_DPI = 150
PAGE_WIDTH_MM = 210
PAGE_HEIGHT_MM = 297
MARGIN_MM = 15

_FONT_CANDIDATES = {
    False: ["DejaVuSans.ttf", "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", "Arial.ttf"],
    True: ["DejaVuSans-Bold.ttf", "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", "Arial Bold.ttf"],
}


def create_bar(level: int, length: int = BAR_LENGTH, filled_char: str = "█", empty_char: str = "░") -> str:
    level = max(0, min(100, level))
    filled = (level * length) // 100
    return filled_char * filled + empty_char * (length - filled)


def format_snapshot(snapshot: PrinterSnapshot) -> str:
    lines = [
        "--- PRINTER INFORMATION ---",
        f"Printer Info: {snapshot.name}",
        f"Model: {snapshot.model}",
        "",
        "--- PRINTER STATUS ---",
        f"State: {snapshot.state_label}",
        f"State Reasons: {snapshot.state_reasons}",
    ]
    if snapshot.state_message:
        lines.append(f"Message: {snapshot.state_message}")

    lines.append("")
    lines.append("--- INK LEVELS ---")
    for ink in snapshot.ink_levels:
        lines.append(f"{ink.name:<20} [{create_bar(ink.level)}] {ink.level:3d}% ({ink.color})")
    return "\n".join(lines)


def _mm(value: float) -> int:
    return int(round(value * REPORT_DPI / 25.4))


def _load_font(size_mm: float, bold: bool = False):
    size = _mm(size_mm)
    for candidate in _FONT_CANDIDATES[bold]:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _level_color(level: int):
    # Rojo si está bajo, amarillo si es medio, verde si es alto
    if level < 20:
        return (231, 76, 60)
    if level < 50:
        return (241, 196, 15)
    return (46, 204, 113)


def _swatch_color(color: str):
    try:
        return ImageColor.getrgb(color)
    except ValueError:
        return (160, 160, 160)


# Dibuja el reporte sobre un lienzo A4 avanzando un cursor vertical
class _ReportCanvas:

    def __init__(self):
        self.image = Image.new("RGB", (_mm(PAGE_WIDTH_MM), _mm(PAGE_HEIGHT_MM)), "white")
        self.draw = ImageDraw.Draw(self.image)
        self.left = _mm(MARGIN_MM)
        self.right = _mm(PAGE_WIDTH_MM - MARGIN_MM)
        self.y = _mm(MARGIN_MM)
        self.regular = _load_font(3.5)
        self.bold = _load_font(3.5, bold=True)
        self.small = _load_font(3)
        self.title = _load_font(6, bold=True)
        self.section = _load_font(4.2, bold=True)

    def skip(self, mm: float):
        self.y += _mm(mm)

    def banner(self, text: str, height_mm: float, fill, font, text_fill="white"):
        height = _mm(height_mm)
        self.draw.rectangle([self.left, self.y, self.right, self.y + height], fill=fill, outline=(0, 0, 0))
        center = ((self.left + self.right) // 2, self.y + height // 2)
        self.draw.text(center, text, font=font, fill=text_fill, anchor="mm")
        self.y += height

    def section_header(self, title: str, fill):
        height = _mm(7)
        self.draw.rectangle([self.left, self.y, self.right, self.y + height], fill=fill, outline=(0, 0, 0))
        self.draw.text((self.left + _mm(2), self.y + height // 2), title, font=self.section, fill="white", anchor="lm")
        self.y += height + _mm(1)

    def info_row(self, key: str, value: str):
        height = _mm(6)
        middle = self.y + height // 2
        self.draw.text((self.left + _mm(2), middle), key, font=self.bold, fill="black", anchor="lm")
        self.draw.text((self.left + _mm(45), middle), value, font=self.regular, fill="black", anchor="lm")
        self.y += height

    def ink_row(self, name: str, level: int, color: str):
        height = _mm(8)
        middle = self.y + height // 2
        self.draw.text((self.left + _mm(2), middle), name, font=self.bold, fill="black", anchor="lm")

        # Muestra del color del tanque
        swatch_x = self.left + _mm(38)
        self.draw.rectangle([swatch_x, middle - _mm(2), swatch_x + _mm(4), middle + _mm(2)],
                            fill=_swatch_color(color), outline=(100, 100, 100))

        bar_x = self.left + _mm(45)
        bar_width = _mm(100)
        top, bottom = middle - _mm(3), middle + _mm(3)
        self.draw.rectangle([bar_x, top, bar_x + bar_width, bottom], fill=(220, 220, 220))
        clamped = max(0, min(100, level))
        if clamped > 0:
            self.draw.rectangle([bar_x, top, bar_x + bar_width * clamped // 100, bottom], fill=_level_color(clamped))
        self.draw.rectangle([bar_x, top, bar_x + bar_width, bottom], outline=(100, 100, 100))
        self.draw.text((self.right, middle), f"{level:3d}%", font=self.regular, fill="black", anchor="rm")
        self.y += height

    def footer(self, lines):
        # Empujar el pie al fondo si hay espacio
        target = _mm(PAGE_HEIGHT_MM - 20 - 15)
        self.y = max(self.y + _mm(4), target)
        self.draw.line([self.left, self.y, self.right, self.y], fill=(189, 195, 199), width=2)
        self.y += _mm(2)
        for text, font in lines:
            self.draw.text(((self.left + self.right) // 2, self.y + _mm(2)), text, font=font,
                           fill=(127, 140, 141), anchor="mm")
            self.y += _mm(4)


def generate_status_report(snapshot: PrinterSnapshot, printer_uri: str, output_path: str,
                           generated_at: Optional[datetime] = None) -> str:
    generated_at = generated_at or datetime.now()
    canvas = _ReportCanvas()

    canvas.banner("PRINTER STATUS REPORT", 12, (41, 128, 185), canvas.title)
    canvas.banner(f"Generated: {generated_at:%Y-%m-%d %H:%M:%S}", 8, (236, 240, 241), canvas.regular,
                  text_fill="black")
    canvas.skip(5)

    canvas.section_header("PRINTER", (52, 152, 219))
    canvas.info_row("Name:", snapshot.name)
    canvas.info_row("Model:", snapshot.model)
    canvas.info_row("Status:", snapshot.state_label)
    if snapshot.state_reasons and snapshot.state_reasons != "none":
        canvas.info_row("Reason:", snapshot.state_reasons)
    if snapshot.state_message:
        canvas.info_row("Message:", snapshot.state_message)
    canvas.skip(2)

    canvas.section_header("INK LEVELS", (46, 204, 113))
    for ink in snapshot.ink_levels:
        canvas.ink_row(ink.name, ink.level, ink.color)
    canvas.skip(2)

    canvas.section_header("PROGRAM INFORMATION", (155, 89, 182))
    canvas.info_row("Command:", "ippprint info")
    canvas.info_row("Version:", settings.VERSION)
    canvas.info_row("Python version:", platform.python_version())
    canvas.info_row("PDF library:", f"Pillow {PIL.__version__}")
    canvas.skip(2)

    canvas.section_header("PRINTER_URI", (241, 196, 15))
    canvas.info_row("URI:", printer_uri)

    canvas.footer([
        ("Generated with ippprint", canvas.small),
        (f"IPP {settings.IPP_VERSION} / {settings.IPP_NATURAL_LANGUAGE}", canvas.small),
    ])

    canvas.image.save(output_path, "PDF", resolution=REPORT_DPI)
    logger.info(f"Status report written to {output_path}")
    return output_path
