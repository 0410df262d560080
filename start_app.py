# start_app.py
"""Load settings and launch the storefront API server."""

from __future__ import annotations

import argparse
import os
import sys

import uvicorn
from dotenv import load_dotenv

import config


def main(argv: list[str] | None = None) -> None:
    """Load ``.env``, validate settings, then start uvicorn.

    The schema is created by the application on startup.
    """

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="0.0.0.0")  # nosec B104: bind for local development
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    parser.add_argument(
        "--memory-db",
        action="store_true",
        help="Use a throwaway in-memory SQLite database",
    )
    args = parser.parse_args(argv)

    load_dotenv()  # load environment variables from a .env file
    if args.memory_db:
        os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
        config.get_settings.cache_clear()

    settings = config.get_settings()

    try:
        uvicorn.run(
            "storefront.app.main:app",
            host=args.host,
            port=args.port,
            log_level=settings.log_level.lower(),
        )
    except ModuleNotFoundError as exc:
        missing = exc.name or str(exc)
        print(
            f"Missing dependency: {missing}. Install it with 'pip install {missing}'",
            file=sys.stderr,
        )
        raise SystemExit(1)


if __name__ == "__main__":
    main()
