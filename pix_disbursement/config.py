"""
Configuración general para el reparto de saldo por PIX (Asaas).

Flujo:
    1. Lee pix-keys/ → un beneficiario por archivo .json
    2. Lee paid.txt (ledger) → beneficiarios ya comprometidos
    3. Consulta el saldo de la cuenta y descuenta RESERVE
    4. Reparte el saldo: monto aleatorio por beneficiario, ledger antes de cada transferencia

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

# Timeout por petición (segundos)
REQUEST_TIMEOUT = 30

# ============================================================================
# CONFIGURACIÓN: ARCHIVOS
# ============================================================================

# Directorio con un .json por beneficiario (relativo a este script)
PIX_KEYS_DIR = "./pix-keys"

# Ledger de beneficiarios ya comprometidos (un id por línea)
LEDGER_FILE = "./paid.txt"

LOGS_DIR = "./logs"

# ============================================================================
# CONFIGURACIÓN: REPARTO
# ============================================================================

# Monto que se deja en la cuenta (R$); se descuenta del saldo antes de repartir
RESERVE = "10.00"

# Delay entre transferencias (ms)
DELAY_MS = 500

# Si es True, solo sortea y muestra los montos: no escribe el ledger ni llama a /transfers.
# El saldo sí se consulta en la API.
DRY_RUN = True
