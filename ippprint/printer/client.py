# -*- coding: utf-8 -*-
# Cliente IPP de alto nivel: envío de documentos y consulta de estado
# Cada operación es un único round trip bloqueante

import itertools
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from ippprint.config.settings import settings
from ippprint.core.errors import LocalIOError
from ippprint.core.options import PrintOptions, report_print_options
from ippprint.ipp.transport import IPPTransport
from ippprint.printer.print_job import (PrintResult, build_submit_request,
                                        guess_document_format, interpret_response)
from ippprint.printer.report import generate_status_report
from ippprint.printer.status import PrinterSnapshot, build_status_request, interpret_status_response
from ippprint.utils import human_size

logger = logging.getLogger(__name__)


class PrinterClient:

    def __init__(self, printer_uri: str, transport: Optional[IPPTransport] = None, user: Optional[str] = None):
        self.printer_uri = printer_uri
        self.transport = transport or IPPTransport()
        self.user = user or settings.REQUESTING_USER
        self._request_ids = itertools.count(1)

    def print_file(self, path, options: PrintOptions) -> PrintResult:
        path = Path(path)
        # Leer el documento antes de cualquier actividad de red
        try:
            document = path.read_bytes()
        except OSError as e:
            raise LocalIOError(f"reading {path}: {e.strerror or e}") from e

        return self.print_document(document, path.name, options, guess_document_format(path))

    def print_document(self, document: bytes, job_name: str, options: PrintOptions,
                       document_format: str = None) -> PrintResult:
        request = build_submit_request(
            self.printer_uri,
            document,
            job_name,
            options,
            user=self.user,
            document_format=document_format,
            request_id=next(self._request_ids),
        )
        logger.info(f"Submitting '{job_name}' ({human_size(len(document))}) to {self.printer_uri}")

        result = interpret_response(self.transport.post(self.printer_uri, request))
        if result.succeeded:
            logger.info(f"Print job accepted: job-id={result.job_id} ({result.status})")
        return result

    def query_status(self) -> PrinterSnapshot:
        request = build_status_request(self.printer_uri, request_id=next(self._request_ids))
        return interpret_status_response(self.transport.post(self.printer_uri, request))

    # Genera el reporte PDF de estado y lo envía a la impresora
    def print_status_report(self, output_dir: str = None,
                            options: PrintOptions = None) -> Tuple[str, PrintResult]:
        snapshot = self.query_status()

        output_dir = output_dir or settings.REPORT_DIR
        os.makedirs(output_dir, exist_ok=True)
        pdf_path = os.path.join(output_dir, f"printer-status-{datetime.now():%Y%m%d-%H%M%S}.pdf")
        generate_status_report(snapshot, self.printer_uri, pdf_path)

        result = self.print_file(pdf_path, options or report_print_options())
        return pdf_path, result
