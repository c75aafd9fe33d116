"""
Repository para los beneficiarios pendientes (directorio pix-keys/).

Un archivo .json por beneficiario. El orden de procesamiento es el orden
alfabético de los nombres de archivo.
"""

import json
from pathlib import Path
from typing import List

from common.pix.payee import Payee


def list_payees(directory: str) -> List[Payee]:
    """
    Lee todos los archivos .json del directorio.

    Args:
        directory: Ruta al directorio con las llaves PIX

    Returns:
        Lista de Payee en orden de nombre de archivo

    Raises:
        FileNotFoundError: Si el directorio no existe
        ValueError: Si un archivo no contiene un objeto JSON o define "value"
    """
    path = Path(directory)
    if not path.is_dir():
        raise FileNotFoundError(f"No se encontró el directorio de llaves PIX: {directory}")

    payees = []
    for file in sorted(path.glob("*.json")):
        if file.name.startswith("."):
            continue
        payees.append(read_payee(file))
    return payees


def read_payee(file: Path) -> Payee:
    with open(file, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"JSON inválido en {file.name}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{file.name} debe contener un objeto JSON, se obtuvo {type(data).__name__}")

    if "value" in data:
        raise ValueError(f"{file.name} no puede definir 'value': el monto lo decide el script")

    return Payee(payee_id=file.name, pix_fields=data)
