from __future__ import annotations

import os


class Settings:
    def _int(self, name: str, default: int) -> int:
        raw = os.getenv(name, "").strip()
        try:
            return int(raw) if raw else default
        except ValueError:
            return default

    def __init__(self) -> None:
        # Sales-history backend (Spring Boot service).
        self.api_base_url = (
            os.getenv("POS_API_BASE_URL", "").strip() or "http://localhost:8080/api"
        )
        # Milliseconds, same unit the mobile client used.
        self.api_timeout_ms = self._int("POS_API_TIMEOUT_MS", 10000)
        # "http" talks to the backend; "memory" keeps orders in-process.
        self.backend = os.getenv("POS_BACKEND", "http").strip().lower() or "http"
        self.order_id_attempts = max(1, self._int("POS_ORDER_ID_ATTEMPTS", 3))
        self.log_level = os.getenv("POS_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        self.host = os.getenv("POS_HOST", "127.0.0.1")
        self.port = self._int("POS_PORT", 8000)

    @property
    def api_timeout_seconds(self) -> float:
        return self.api_timeout_ms / 1000.0