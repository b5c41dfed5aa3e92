from __future__ import annotations

import sys

import uvicorn

from pos_checkout.adapters.inbound.cli import run_cli
from pos_checkout.bootstrap import build_quote
from pos_checkout.config import Settings
from pos_checkout.logging_setup import configure_logging


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    if not argv:
        print("usage: pos-checkout '<json>'")
        return 2

    configure_logging(Settings().log_level)
    return run_cli(build_quote(), argv[0])


def serve() -> None:
    settings = Settings()
    uvicorn.run(
        "pos_checkout.asgi:create_asgi_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    raise SystemExit(main())
