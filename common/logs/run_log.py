"""
Log JSON de cada ejecución (logs/<prefijo>_<YYYYmmdd_HHMMSS>.json).

Incluye los intercambios HTTP capturados por ExchangeRecorder, que se conecta
al cliente de Asaas como hook on_exchange.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List


class ExchangeRecorder:
    """Hook on_exchange que acumula los request/response de una ejecución."""

    def __init__(self):
        self.exchanges: List[Dict[str, Any]] = []

    def __call__(self, exchange: Dict[str, Any]) -> None:
        self.exchanges.append(exchange)


def save_log(logs_dir: Path, prefix: str, log_data: Dict[str, Any]) -> Path:
    """
    Guarda el log JSON de la ejecución.

    Args:
        logs_dir: Directorio de logs (se crea si no existe)
        prefix: Prefijo del archivo (ej: "disbursement")
        log_data: Contenido; se agrega "timestamp" en UTC

    Returns:
        Ruta del archivo generado
    """
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"{prefix}_{timestamp}.json"

    data = {"timestamp": datetime.now(timezone.utc).isoformat(), **log_data}
    with open(log_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)

    print(f"\nLog guardado en: {log_file}")
    return log_file
