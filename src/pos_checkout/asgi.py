from __future__ import annotations

from fastapi import FastAPI

from pos_checkout.adapters.inbound.web.fastapi_app import create_app
from pos_checkout.bootstrap import build_sales_history, build_usecases
from pos_checkout.config import Settings
from pos_checkout.logging_setup import configure_logging


def create_asgi_app() -> FastAPI:
    settings = Settings()
    configure_logging(settings.log_level)
    sales_history = build_sales_history(settings)
    usecases = build_usecases(settings, sales_history=sales_history)
    return create_app(
        usecases.quote,
        usecases.checkout,
        usecases.shift_summary,
        on_shutdown=sales_history.close,
    )
