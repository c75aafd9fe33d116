"""
Configuración para el envío de un monto fijo a cada llave PIX (Asaas).

Flujo:
    1. Lee pix-keys/ → un beneficiario por archivo .json
    2. Envía TRANSFER_VALUE a cada uno (POST /transfers)

No usa ledger: cada ejecución vuelve a transferir a todos los archivos.

Variables de entorno requeridas (en .env de la raíz del repo):
    ASAAS_TOKEN  → access_token de la cuenta Asaas
    ASAAS_ENV    → sandbox | prod (default: sandbox)
"""

import os

# ============================================================================
# CONFIGURACIÓN: API ASAAS
# ============================================================================

ASAAS_TOKEN = os.getenv("ASAAS_TOKEN", "")

ASAAS_ENV = os.getenv("ASAAS_ENV", "sandbox")

REQUEST_TIMEOUT = 30

# ============================================================================
# CONFIGURACIÓN: ARCHIVOS
# ============================================================================

PIX_KEYS_DIR = "./pix-keys"

LOGS_DIR = "./logs"

# ============================================================================
# CONFIGURACIÓN: EJECUCIÓN
# ============================================================================

# Monto por transferencia (R$)
TRANSFER_VALUE = "1.00"

DELAY_MS = 0
