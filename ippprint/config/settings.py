import getpass
import os
from urllib.parse import urlparse

from dotenv import load_dotenv

# Cargar variables desde archivo .env si existe
load_dotenv()


def _default_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "anonymous"


class PrintClientSettings:

    # Impresora destino, p. ej. http://localhost:631/printers/EPSON_ET-8550_Series
    PRINTER_URI = os.getenv('PRINTER_URI', '')

    # Configuración IPP
    IPP_VERSION = os.getenv('IPP_VERSION', '2.0')
    IPP_CHARSET = "utf-8"
    IPP_NATURAL_LANGUAGE = os.getenv('IPP_NATURAL_LANGUAGE', 'en-US')
    IPP_DEFAULT_PORT = 631
    DEFAULT_DOCUMENT_FORMAT = "application/pdf"

    # Usuario que se envía en requesting-user-name
    REQUESTING_USER = os.getenv('IPP_USER') or os.getenv('USER') or _default_user()

    # Tiempo máximo del round trip HTTP en segundos
    HTTP_TIMEOUT = float(os.getenv('IPP_HTTP_TIMEOUT', 30))

    # Configuración de registro/logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')
    LOG_FILE = os.getenv('LOG_FILE', None)  # Ninguno = salida a consola

    # Archivo JSON opcional con perfiles personalizados
    PROFILES_FILE = os.getenv('IPPPRINT_PROFILES', None)

    # Directorio donde se guardan los reportes de estado en PDF
    REPORT_DIR = os.getenv('REPORT_DIR', '.')

    # Información de la versión
    VERSION = "1.0.0"

    @classmethod
    def ipp_version(cls):
        major, _, minor = cls.IPP_VERSION.partition('.')
        return int(major), int(minor or 0)

    @classmethod
    def validate_config(cls, printer_uri: str = None):
        errors = []
        uri = cls.PRINTER_URI if printer_uri is None else printer_uri

        if not uri:
            errors.append("PRINTER_URI is not set (use the PRINTER_URI environment variable or --printer)")
        elif urlparse(uri).scheme not in ('http', 'https', 'ipp', 'ipps'):
            errors.append(f"PRINTER_URI must use http, https, ipp or ipps (got '{uri}')")

        try:
            major, minor = cls.ipp_version()
            if (major, minor) not in [(1, 1), (2, 0), (2, 1), (2, 2)]:
                errors.append(f"IPP_VERSION should be 1.1, 2.0, 2.1 or 2.2 (got {cls.IPP_VERSION})")
        except ValueError:
            errors.append(f"IPP_VERSION is not a version number: {cls.IPP_VERSION}")

        if cls.HTTP_TIMEOUT <= 0:
            errors.append("IPP_HTTP_TIMEOUT must be greater than 0")

        return errors

# Cargar configuración por defecto
settings = PrintClientSettings()
