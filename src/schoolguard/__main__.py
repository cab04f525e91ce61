"""Run the API with uvicorn: ``python -m schoolguard`` or ``schoolguard``."""

import argparse

import uvicorn

from schoolguard.config import settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the school record API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument(
        "--reload", action="store_true", help="Restart on code changes (development)"
    )
    args = parser.parse_args()

    uvicorn.run(
        "schoolguard.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload and settings.is_development,
        log_level=settings.log_level.lower(),
        # Requests are logged by RequestLoggingMiddleware
        access_log=False,
    )


if __name__ == "__main__":
    main()
