"""Sidecar entry point — uvicorn launcher for the shot registry API.

Usage:
    python sidecar_entry.py --port 12345
"""

import argparse


def main() -> None:
    from script_shots.infra.config import LOG_LEVEL

    parser = argparse.ArgumentParser(description="Script Shots Backend Sidecar")
    parser.add_argument("--port", type=int, default=8000, help="HTTP port")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    parser.add_argument("--log-level", type=str, default=LOG_LEVEL, help="uvicorn log level")
    args = parser.parse_args()

    import uvicorn

    uvicorn.run(
        "script_shots.api.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
