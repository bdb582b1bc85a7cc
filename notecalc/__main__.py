"""Run the application with uvicorn: ``python -m notecalc``."""
from __future__ import annotations

import uvicorn

from notecalc.app import create_app
from notecalc.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
