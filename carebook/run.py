# carebook/run.py
"""
Development server runner.

Creates the tables for the configured database and serves the API with
auto-reload: ``python -m carebook.run``.
"""

import os

import uvicorn

from .init_db import init_db

if __name__ == "__main__":
    init_db()
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("carebook.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
