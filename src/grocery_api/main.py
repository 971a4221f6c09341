from __future__ import annotations

import sys

import uvicorn

from grocery_api.adapters.inbound.cli import run_cli
from grocery_api.bootstrap import build_usecases
from grocery_api.config import settings

USAGE = "usage: python -m grocery_api.main [place-order '<json>']"


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    if not argv:
        uvicorn.run(
            "grocery_api.bootstrap:create_asgi_app",
            factory=True,
            host=settings.HOST,
            port=settings.PORT,
            log_level=settings.LOG_LEVEL.lower(),
        )
        return 0

    if argv[0] == "place-order" and len(argv) == 2:
        usecases = build_usecases()
        return run_cli(usecases.place_order, usecases.receipt, argv[1])

    print(USAGE)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
