# -*- coding: utf-8 -*-
# Utilidades compartidas por las pruebas: respuestas IPP falsas y transporte simulado

import pytest

from ippprint.ipp.ipp_parser import IPPMessage, IPPParser, IPPStatusCode, IPPTag


def build_ipp_response(status=IPPStatusCode.SUCCESSFUL_OK, job_attributes=None, printer_attributes=None,
                       request_id=1):
    message = IPPMessage(2, 0)
    message.status_code = status
    message.request_id = request_id
    message.add_operation_attribute('attributes-charset', IPPTag.CHARSET, 'utf-8')
    message.add_operation_attribute('attributes-natural-language', IPPTag.NATURAL_LANGUAGE, 'en-us')
    for name, (tag, value) in (job_attributes or {}).items():
        message.add_job_attribute(name, tag, value)
    for name, (tag, value) in (printer_attributes or {}).items():
        message.add_printer_attribute(name, tag, value)
    return IPPParser.build_response(message)


# Transporte que registra las solicitudes y devuelve respuestas predefinidas
class FakeTransport:

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def post(self, printer_uri, body):
        self.requests.append((printer_uri, body))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def ipp_response():
    return build_ipp_response


@pytest.fixture
def fake_transport():
    return FakeTransport
