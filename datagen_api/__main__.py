"""Run the API server with uvicorn.

    python -m datagen_api [--host HOST] [--port PORT] [--reload]

Defaults come from ``ApiConfig`` (``DATAGEN_API_HOST``, ``DATAGEN_API_PORT``,
``DATAGEN_API_LOG_LEVEL`` or ``.env``). Flags win over settings.
"""

from __future__ import annotations

import argparse

from datagen_api.config import ApiConfig


def build_parser(config: ApiConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="datagen-api",
        description="Serve fake test data behind API keys and per-plan rate limits.",
    )
    parser.add_argument("--host", default=config.host, help=f"bind address (default: {config.host})")
    parser.add_argument("--port", type=int, default=config.port, help=f"bind port (default: {config.port})")
    parser.add_argument("--reload", action="store_true", help="restart on code changes (development only)")
    return parser


def main(argv: list[str] | None = None) -> None:
    config = ApiConfig()
    args = build_parser(config).parse_args(argv)

    import uvicorn

    uvicorn.run(
        "datagen_api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
