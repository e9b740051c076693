"""HTTP service mode for nsgen."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
