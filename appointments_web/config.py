"""Environment configuration for the appointments web proxy."""
from __future__ import annotations
import logging
import os
from dotenv import load_dotenv

load_dotenv()

# Remote appointments service; only the edge routes talk to it directly.
BACKEND_API_URL = os.getenv("BACKEND_API_URL", "http://localhost:8000").rstrip("/")
# Absolute address of this service's own /api routes, used by server-side callers.
INTERNAL_API_URL = os.getenv("NEXT_PUBLIC_INTERNAL_API_URL", "http://localhost:3000/api").rstrip("/")

API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "15"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
