# -*- coding: utf-8 -*-
# Utilidades comunes del cliente: logging, validación de configuración y formato

import logging
import logging.handlers
import os
import sys
import traceback

from ippprint.config.settings import settings
from ippprint.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Consola breve; el archivo lleva fecha y módulo
CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _file_handler(path: str) -> logging.Handler:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(log_level: str = None, log_file: str = None) -> logging.Logger:
    level_name = (log_level or settings.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.WARNING)

    root = logging.getLogger()
    root.setLevel(level)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    # stderr: stdout queda libre para la salida de los comandos (texto/JSON)
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    path = log_file or settings.LOG_FILE
    if path:
        try:
            root.addHandler(_file_handler(path))
            logger.info(f"Writing log to {path}")
        except OSError as e:
            logger.warning(f"Cannot open log file {path}: {e}")

    # urllib3 registra cada conexión en DEBUG
    logging.getLogger('urllib3').setLevel(max(level, logging.INFO))

    logger.debug(f"Logging level {level_name}")
    return root


def validate_configuration(printer_uri: str = None) -> None:
    problems = settings.validate_config(printer_uri)
    for problem in problems:
        logger.debug(f"Configuration problem: {problem}")
    if problems:
        raise ConfigurationError("; ".join(problems))


# Tamaño legible para los mensajes de envío
def human_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    value = float(num_bytes)
    for unit in ('KB', 'MB', 'GB'):
        value /= 1024
        if value < 1024:
            return f"{value:.1f} {unit}"
    return f"{value / 1024:.1f} TB"


def log_unexpected(command: str, error: Exception):
    logger.error(f"Unexpected error in '{command}': {error}")
    logger.debug("".join(traceback.format_exception(type(error), error, error.__traceback__)))
