# -*- coding: utf-8 -*-
# Jerarquía de errores del cliente de impresión
# Todos derivan de PrintClientError para que la CLI los capture en un solo lugar

from typing import Optional


class PrintClientError(Exception):
    pass


class ConfigurationError(PrintClientError):
    pass


# Identificador (nombre o ID) que no existe en el registro
class UnknownProfile(PrintClientError):

    def __init__(self, identifier, message: Optional[str] = None):
        self.identifier = identifier
        super().__init__(message or f"unknown print profile: {identifier}")


class InvalidQuality(PrintClientError):

    def __init__(self, quality):
        self.quality = quality
        super().__init__(f"quality must be 3 (draft), 4 (normal), or 5 (best), got {quality}")


class InvalidCopies(PrintClientError):

    def __init__(self, copies):
        self.copies = copies
        super().__init__(f"copies must be between 1 and 2147483647 (got {copies})")


class InvalidPageRange(PrintClientError):

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"cannot parse page range: {text!r}")


# Fallo de red/conexión durante el round trip HTTP
class TransportError(PrintClientError):
    pass


# Respuesta IPP malformada o imposible de decodificar
class DecodeError(PrintClientError):
    pass


# La impresora aceptó los bytes pero devolvió un estado distinto de éxito
class ProtocolError(PrintClientError):

    def __init__(self, status: str, job_id: int = 0):
        self.status = status
        self.job_id = job_id
        super().__init__(f"printer returned error: {status}")


# Documento local ilegible; ocurre antes de cualquier actividad de red
class LocalIOError(PrintClientError):
    pass
