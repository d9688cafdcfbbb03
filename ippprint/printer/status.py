# -*- coding: utf-8 -*-
# Consulta de estado de la impresora (Get-Printer-Attributes)
# Decodifica estado, mensajes y niveles de tinta en un PrinterSnapshot

import json
import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from ippprint.ipp.ipp_parser import (IPPMessage, IPPOperation, IPPParser,
                                     IPPStatusCode, IPPTag, status_keyword)
from ippprint.printer.print_job import new_request

logger = logging.getLogger(__name__)


class PrinterState(str, Enum):
    IDLE = "Idle"
    PROCESSING = "Processing"
    STOPPED = "Stopped"
    UNKNOWN = "Unknown"


# Valores de printer-state (RFC 8011)
_STATE_CODES = {
    3: PrinterState.IDLE,
    4: PrinterState.PROCESSING,
    5: PrinterState.STOPPED,
}


class InkLevel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    level: int
    color: str


class PrinterSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    model: str = ""
    state: PrinterState = PrinterState.UNKNOWN
    # Código crudo cuando el estado es desconocido; None si el atributo no vino
    state_code: Optional[int] = None
    state_reasons: str = ""
    state_message: Optional[str] = None
    ink_levels: List[InkLevel] = []

    @property
    def state_label(self) -> str:
        if self.state == PrinterState.UNKNOWN and self.state_code is not None:
            return f"Unknown ({self.state_code})"
        return self.state.value

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json", exclude={"state_code"}, exclude_none=True)
        data["state"] = self.state_label
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def build_status_request(printer_uri: str, request_id: int = 1) -> bytes:
    message = new_request(IPPOperation.GET_PRINTER_ATTRIBUTES, printer_uri, request_id)
    message.add_operation_attribute('requested-attributes', IPPTag.KEYWORD, 'all')
    return IPPParser.build_request(message)


def _first_text(message: IPPMessage, name: str) -> str:
    attribute = message.printer_attributes.get(name)
    if attribute is None or not attribute.values or attribute.value is None:
        return ""
    return str(attribute.value)


def decode_state(message: IPPMessage):
    attribute = message.printer_attributes.get('printer-state')
    if attribute is None or not isinstance(attribute.value, int):
        return PrinterState.UNKNOWN, None
    code = attribute.value
    state = _STATE_CODES.get(code)
    if state is None:
        return PrinterState.UNKNOWN, code
    return state, None


# Las tres listas se combinan por posición; si falta alguna no hay niveles
def decode_ink_levels(message: IPPMessage) -> List[InkLevel]:
    names = message.printer_attributes.get('marker-names')
    levels = message.printer_attributes.get('marker-levels')
    colors = message.printer_attributes.get('marker-colors')
    if names is None or levels is None or colors is None:
        return []

    ink_levels = []
    for name, level, color in zip(names.values, levels.values, colors.values):
        ink_levels.append(InkLevel(
            name=str(name),
            level=level if isinstance(level, int) else 0,
            color=str(color),
        ))
    return ink_levels


def decode_snapshot(message: IPPMessage) -> PrinterSnapshot:
    if message.status_code is not None and message.status_code not in (
            IPPStatusCode.SUCCESSFUL_OK,
            IPPStatusCode.SUCCESSFUL_OK_IGNORED_OR_SUBSTITUTED_ATTRIBUTES):
        logger.warning(f"Get-Printer-Attributes returned {status_keyword(message.status_code)}")

    state, state_code = decode_state(message)
    return PrinterSnapshot(
        name=_first_text(message, 'printer-info'),
        model=_first_text(message, 'printer-make-and-model'),
        state=state,
        state_code=state_code,
        state_reasons=_first_text(message, 'printer-state-reasons'),
        state_message=_first_text(message, 'printer-state-message') or None,
        ink_levels=decode_ink_levels(message),
    )


def interpret_status_response(data: bytes) -> PrinterSnapshot:
    return decode_snapshot(IPPParser.parse_response(data))
