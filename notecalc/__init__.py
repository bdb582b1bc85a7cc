"""notecalc: server-rendered notes and calculators, stored as JSON files."""
from notecalc.app import create_app

__all__ = ["create_app"]
