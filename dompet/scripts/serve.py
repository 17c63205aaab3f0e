#!/usr/bin/env python3
"""
Start the Dompet API server.

Port and bind address come from PORT / HOST unless given on the command line.
"""
import argparse

import uvicorn

from dompet.config import settings


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the Dompet API server")
    parser.add_argument("--host", default=settings.host, help="bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=settings.port, help="port (default: %(default)s)")
    parser.add_argument("--reload", action="store_true", help="restart on code changes")
    args = parser.parse_args(argv)

    uvicorn.run(
        "dompet.backend.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
