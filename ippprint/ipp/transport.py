# -*- coding: utf-8 -*-
# Transporte HTTP para mensajes IPP
# Un POST por operación; sin reintentos ni pool de conexiones

import logging
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import requests

from ippprint.config.settings import settings
from ippprint.core.errors import TransportError

logger = logging.getLogger(__name__)

IPP_CONTENT_TYPE = "application/ipp"

_SCHEME_MAP = {"ipp": "http", "ipps": "https"}


# Convierte ipp:// e ipps:// en la URL HTTP equivalente (puerto 631 por defecto)
def to_http_url(printer_uri: str) -> str:
    parts = urlsplit(printer_uri)
    scheme = parts.scheme.lower()
    if scheme not in _SCHEME_MAP:
        return printer_uri

    netloc = parts.netloc
    if parts.port is None:
        netloc = f"{netloc}:{settings.IPP_DEFAULT_PORT}"
    return urlunsplit((_SCHEME_MAP[scheme], netloc, parts.path, parts.query, parts.fragment))


class IPPTransport:

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT

    # Envía el cuerpo IPP y devuelve el cuerpo de la respuesta
    def post(self, printer_uri: str, body: bytes) -> bytes:
        url = to_http_url(printer_uri)
        logger.debug(f"POST {url} ({len(body)} bytes)")

        try:
            response = requests.post(
                url,
                data=body,
                headers={"Content-Type": IPP_CONTENT_TYPE},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            raise TransportError(f"HTTP {e.response.status_code} from {url}") from e
        except requests.RequestException as e:
            raise TransportError(f"sending IPP request to {url}: {e}") from e

        logger.debug(f"Respuesta HTTP {response.status_code} ({len(response.content)} bytes)")
        return response.content
