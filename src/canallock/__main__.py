"""Entry point for the canal lock simulator."""

import argparse
import logging
import os
import sys


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Canal Lock Simulator",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind API server to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind API server to (default: 8000)",
    )
    parser.add_argument(
        "--env",
        default=None,
        help="Configuration environment (default: CANALLOCK_ENV or 'development')",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--no-access-log",
        action="store_true",
        help="Disable access logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.env:
        os.environ["CANALLOCK_ENV"] = args.env

    import uvicorn

    uvicorn.run(
        "canallock.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
        access_log=not args.no_access_log,
    )

    return 0


if __name__ == "__main__":
    sys.exit(main())
