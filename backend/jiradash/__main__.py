"""Run the dashboard API under uvicorn.

Usage:
    python -m jiradash [--host HOST] [--port PORT] [--reload]
"""

import argparse
import os

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Jira dashboard API server")
    parser.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")))
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run("jiradash.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
