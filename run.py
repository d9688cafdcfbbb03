#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Punto de entrada del cliente de impresión IPP
# Equivalente al comando ippprint instalado

import sys

from dotenv import load_dotenv

# Cargar variables desde archivo .env si existe (PRINTER_URI, LOG_LEVEL, ...)
load_dotenv()

if __name__ == "__main__":
    # Import diferido para que .env se aplique antes de leer la configuración
    from ippprint.main import main
    sys.exit(main())
