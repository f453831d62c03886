"""
Name: Backend ASGI Entrypoint (docreview.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Preserve the import path used by uvicorn and tests

Notes/Constraints:
  - No configuration or IO should live here; keep it thin and predictable
  - Run with: uvicorn docreview.main:app (from apps/backend)
"""

from docreview.api.main import app

__all__ = ["app"]
