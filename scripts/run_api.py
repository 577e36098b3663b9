#!/usr/bin/env python3
"""Run the Picado JSON API with uvicorn."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import uvicorn

from picado.config import settings
from picado.db.models import Base
from picado.db.session import get_engine


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the Picado API server")
    parser.add_argument("--host", default=settings.api_host, help="Bind host")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Bind port")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before starting (local SQLite runs; use alembic otherwise)",
    )
    args = parser.parse_args()

    if args.create_tables:
        Base.metadata.create_all(get_engine())

    uvicorn.run(
        "picado.web.main:app",
        host=args.host,
        port=args.port,
        reload=settings.api_reload,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
