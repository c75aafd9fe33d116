"""
Repository para el ledger de beneficiarios ya comprometidos (paid.txt).

Formato:
    Texto plano UTF-8, un payee_id por línea, en orden de compromiso.

    ana.json
    bruno.json

Política:
    El payee_id se agrega y se persiste ANTES de llamar a la API. Todo id
    presente en el ledger se salta en esta y en las siguientes ejecuciones,
    aunque la transferencia haya fallado.

El archivo se lee completo al inicio y se reescribe completo en cada commit
(archivo temporal + os.replace).
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable, List


def load_ledger(ledger_path: str) -> List[str]:
    """
    Lee el ledger completo.

    Returns:
        Lista de payee_ids en orden; vacía si el archivo no existe
    """
    path = Path(ledger_path)
    if not path.exists():
        return []

    with open(path, "r", encoding="utf-8") as f:
        lines = (line.rstrip("\r\n") for line in f)
        return [line for line in lines if line.strip()]


def save_ledger(ledger_path: str, payee_ids: Iterable[str]) -> None:
    """Reescribe el ledger completo con los payee_ids dados."""
    path = Path(ledger_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    content = "".join(f"{payee_id}\n" for payee_id in payee_ids)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise


class Ledger:
    """Ledger en memoria respaldado por archivo. Un solo proceso escritor."""

    def __init__(self, ledger_path: str):
        self.path = ledger_path
        self._ids: List[str] = load_ledger(ledger_path)
        self._seen = set(self._ids)

    def contains(self, payee_id: str) -> bool:
        return payee_id in self._seen

    def commit(self, payee_id: str) -> None:
        """Agrega el payee_id y persiste el ledger completo de inmediato."""
        if payee_id in self._seen:
            return
        self._ids.append(payee_id)
        self._seen.add(payee_id)
        save_ledger(self.path, self._ids)

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)
