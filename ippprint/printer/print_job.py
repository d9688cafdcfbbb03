# -*- coding: utf-8 -*-
# Construcción de solicitudes Print-Job e interpretación de la respuesta
# Las opciones se envían con nombres estilo CUPS (PageSize, InputSlot)

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ippprint.config.settings import settings
from ippprint.core.errors import ProtocolError
from ippprint.core.options import PrintOptions
from ippprint.core.page_range import is_all_pages, parse_page_range
from ippprint.ipp.ipp_parser import (IPPMessage, IPPOperation, IPPParser,
                                     IPPStatusCode, IPPTag, status_keyword)

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = (
    IPPStatusCode.SUCCESSFUL_OK,
    IPPStatusCode.SUCCESSFUL_OK_IGNORED_OR_SUBSTITUTED_ATTRIBUTES,
)


@dataclass(frozen=True)
class PrintResult:
    job_id: int
    status: str
    error: Optional[ProtocolError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


# Grupo de operación común a todas las solicitudes del cliente
def new_request(operation: IPPOperation, printer_uri: str, request_id: int = 1) -> IPPMessage:
    message = IPPMessage(*settings.ipp_version())
    message.operation_id = operation
    message.request_id = request_id
    message.add_operation_attribute('attributes-charset', IPPTag.CHARSET, settings.IPP_CHARSET)
    message.add_operation_attribute('attributes-natural-language', IPPTag.NATURAL_LANGUAGE,
                                    settings.IPP_NATURAL_LANGUAGE)
    message.add_operation_attribute('printer-uri', IPPTag.URI, printer_uri)
    return message


def build_print_job_message(printer_uri: str, job_name: str, options: PrintOptions,
                            user: Optional[str] = None,
                            document_format: str = None,
                            request_id: int = 1) -> IPPMessage:
    message = new_request(IPPOperation.PRINT_JOB, printer_uri, request_id)
    message.add_operation_attribute('requesting-user-name', IPPTag.NAME_WITHOUT_LANGUAGE,
                                    user or settings.REQUESTING_USER)
    message.add_operation_attribute('job-name', IPPTag.NAME_WITHOUT_LANGUAGE, job_name)
    message.add_operation_attribute('document-format', IPPTag.MIME_MEDIA_TYPE,
                                    document_format or settings.DEFAULT_DOCUMENT_FORMAT)

    # Atributos de trabajo
    message.add_job_attribute('PageSize', IPPTag.KEYWORD, options.paper_size)
    message.add_job_attribute('InputSlot', IPPTag.KEYWORD, options.tray)
    message.add_job_attribute('media', IPPTag.KEYWORD, options.media_type)
    message.add_job_attribute('print-quality', IPPTag.ENUM, options.quality)
    message.add_job_attribute('copies', IPPTag.INTEGER, options.copies)
    message.add_job_attribute('fit-to-page', IPPTag.BOOLEAN, True)

    if not is_all_pages(options.page_range):
        page_range = parse_page_range(options.page_range)
        message.add_job_attribute('page-ranges', IPPTag.RANGE_OF_INTEGER, page_range.as_tuple())

    return message


# Atributos codificados primero y el documento a continuación, en un solo flujo
def build_submit_request(printer_uri: str, document: bytes, job_name: str, options: PrintOptions,
                         user: Optional[str] = None,
                         document_format: str = None,
                         request_id: int = 1) -> bytes:
    message = build_print_job_message(printer_uri, job_name, options, user, document_format, request_id)
    return IPPParser.build_request(message) + document


# Decodifica la respuesta de Print-Job; el job-id se conserva aun con error
def interpret_response(data: bytes) -> PrintResult:
    message = IPPParser.parse_response(data)

    job_id = 0
    attribute = message.find_attribute('job-id', message.job_attributes) or message.find_attribute('job-id')
    if attribute is not None and isinstance(attribute.value, int):
        job_id = attribute.value

    status = status_keyword(message.status_code)
    if message.status_code in SUCCESS_STATUSES:
        return PrintResult(job_id=job_id, status=status)

    logger.warning(f"Printer rejected job: {status} (job-id={job_id})")
    return PrintResult(job_id=job_id, status=status, error=ProtocolError(status, job_id))


def guess_document_format(path) -> str:
    if Path(path).suffix.lower() == ".pdf":
        return "application/pdf"
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or "application/octet-stream"
