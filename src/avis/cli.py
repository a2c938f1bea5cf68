"""CLI entry point for Avis.

    avis serve --port 3000      run the API with uvicorn
    avis score "très bon"       print the sentiment score of some text
    avis init-db                create the schema and exit
"""

import argparse
import asyncio
import sys

import uvicorn

from avis.config import get_settings
from avis.core.logging import setup_logging
from avis.sentiment import score_sentiment


async def _init_db() -> None:
    from avis.storage import close_database, init_database

    db = await init_database(get_settings().database_url)
    try:
        await db.ensure_schema()
    finally:
        await close_database()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="avis", description="Avis feedback API")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve.add_argument("--host", default="0.0.0.0", help="Bind host")
    serve.add_argument("--port", type=int, default=3000, help="Bind port")

    score = sub.add_parser("score", help="Score feedback text")
    score.add_argument("text", nargs="+", help="Text to score (one score per argument)")

    sub.add_parser("init-db", help="Create the database schema")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    # Bare `avis` keeps the old behaviour of starting the server
    command = args.command or "serve"

    if command == "score":
        for text in args.text:
            print(f"{score_sentiment(text):+.4f}\t{text}")
        return

    if command == "init-db":
        setup_logging(get_settings())
        asyncio.run(_init_db())
        return

    uvicorn.run(
        "avis.main:app",
        host=getattr(args, "host", "0.0.0.0"),
        port=getattr(args, "port", 3000),
        reload=getattr(args, "reload", False),
    )


if __name__ == "__main__":
    main(sys.argv[1:])
