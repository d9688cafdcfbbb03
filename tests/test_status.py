# -*- coding: utf-8 -*-
# Pruebas de la consulta de estado de la impresora

import json

import pytest

from conftest import FakeTransport, build_ipp_response
from ippprint.ipp.ipp_parser import IPPOperation, IPPParser, IPPStatusCode, IPPTag
from ippprint.printer.client import PrinterClient
from ippprint.printer.status import (PrinterSnapshot, PrinterState, build_status_request,
                                     interpret_status_response)

PRINTER_URI = "http://localhost:631/printers/EPSON_ET-8550_Series"

FULL_STATUS = {
    'printer-info': (IPPTag.TEXT_WITHOUT_LANGUAGE, 'EPSON ET-8550 Series'),
    'printer-make-and-model': (IPPTag.TEXT_WITHOUT_LANGUAGE, 'EPSON ET-8550 Series'),
    'printer-state': (IPPTag.ENUM, 3),
    'printer-state-reasons': (IPPTag.KEYWORD, 'none'),
    'marker-names': (IPPTag.NAME_WITHOUT_LANGUAGE, ['Black ink', 'Cyan ink']),
    'marker-levels': (IPPTag.INTEGER, [72, 15]),
    'marker-colors': (IPPTag.NAME_WITHOUT_LANGUAGE, ['#000000', '#00FFFF']),
}


class TestStatusRequest:
    # Get-Printer-Attributes pide todos los atributos
    def test_requested_attributes_all(self):
        message = IPPParser.parse_request(build_status_request(PRINTER_URI, request_id=4))
        assert message.operation_id == IPPOperation.GET_PRINTER_ATTRIBUTES
        assert message.request_id == 4
        assert message.operation_attributes['requested-attributes'].value == 'all'
        assert message.operation_attributes['printer-uri'].value == PRINTER_URI


class TestInterpretStatus:
    # Respuesta completa
    def test_full_snapshot(self):
        snapshot = interpret_status_response(build_ipp_response(printer_attributes=FULL_STATUS))
        assert snapshot.name == 'EPSON ET-8550 Series'
        assert snapshot.state == PrinterState.IDLE
        assert snapshot.state_reasons == 'none'
        assert snapshot.state_message is None
        assert [(i.name, i.level, i.color) for i in snapshot.ink_levels] == [
            ('Black ink', 72, '#000000'),
            ('Cyan ink', 15, '#00FFFF'),
        ]

    # Códigos de estado conocidos y desconocidos
    @pytest.mark.parametrize("code, state, label", [
        (3, PrinterState.IDLE, "Idle"),
        (4, PrinterState.PROCESSING, "Processing"),
        (5, PrinterState.STOPPED, "Stopped"),
        (9, PrinterState.UNKNOWN, "Unknown (9)"),
    ])
    def test_state_mapping(self, code, state, label):
        data = build_ipp_response(printer_attributes={'printer-state': (IPPTag.ENUM, code)})
        snapshot = interpret_status_response(data)
        assert snapshot.state == state
        assert snapshot.state_label == label

    # Sin printer-state: desconocido sin código
    def test_missing_state(self):
        snapshot = interpret_status_response(build_ipp_response())
        assert snapshot.state == PrinterState.UNKNOWN
        assert snapshot.state_code is None
        assert snapshot.state_label == "Unknown"
        assert snapshot.name == ""

    # Listas de distinto largo: se truncan a la más corta
    def test_ink_levels_zip_to_shortest(self):
        data = build_ipp_response(printer_attributes={
            'marker-names': (IPPTag.NAME_WITHOUT_LANGUAGE, ['Black', 'Cyan']),
            'marker-levels': (IPPTag.INTEGER, [80, 40, 10]),
            'marker-colors': (IPPTag.NAME_WITHOUT_LANGUAGE, ['#000000', '#00FFFF']),
        })
        snapshot = interpret_status_response(data)
        assert len(snapshot.ink_levels) == 2
        assert [i.level for i in snapshot.ink_levels] == [80, 40]

    # Falta una de las listas: sin niveles de tinta
    def test_missing_marker_list(self):
        data = build_ipp_response(printer_attributes={
            'marker-names': (IPPTag.NAME_WITHOUT_LANGUAGE, ['Black']),
            'marker-levels': (IPPTag.INTEGER, [80]),
        })
        assert interpret_status_response(data).ink_levels == []

    # Un estado de error no impide decodificar lo que venga
    def test_error_status_is_not_raised(self):
        data = build_ipp_response(IPPStatusCode.CLIENT_ERROR_NOT_AUTHORIZED,
                                  printer_attributes={'printer-state': (IPPTag.ENUM, 5)})
        assert interpret_status_response(data).state == PrinterState.STOPPED


class TestSnapshotJson:
    # El mensaje vacío no aparece en el JSON
    def test_json_omits_empty_message(self):
        snapshot = interpret_status_response(build_ipp_response(printer_attributes=FULL_STATUS))
        data = json.loads(snapshot.to_json())
        assert 'state_message' not in data
        assert 'state_code' not in data
        assert data['state'] == "Idle"
        assert data['ink_levels'][0] == {'name': 'Black ink', 'level': 72, 'color': '#000000'}

    def test_json_includes_message_and_unknown_code(self):
        snapshot = PrinterSnapshot(state=PrinterState.UNKNOWN, state_code=7, state_message="Paper jam")
        data = snapshot.to_dict()
        assert data['state_message'] == "Paper jam"
        assert data['state'] == "Unknown (7)"


class TestQueryStatus:
    def test_query_status_through_client(self):
        transport = FakeTransport(build_ipp_response(printer_attributes=FULL_STATUS))
        snapshot = PrinterClient(PRINTER_URI, transport=transport).query_status()
        assert snapshot.model == 'EPSON ET-8550 Series'
        assert len(transport.requests) == 1
