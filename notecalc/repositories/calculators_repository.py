"""File-backed calculator storage."""
from __future__ import annotations

from pathlib import Path

from notecalc.domain.calculators import Calculator
from notecalc.repositories.json_storage import JsonCollectionStore

DEFAULT_CALCULATORS_FILE = "calculators.json"


class CalculatorManager(JsonCollectionStore[Calculator, int]):
    """Calculators keyed by oid."""

    record_type = Calculator

    def __init__(self, data_dir: Path | str, storage_file: str = DEFAULT_CALCULATORS_FILE) -> None:
        super().__init__(Path(data_dir) / storage_file)
