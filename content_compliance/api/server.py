"""
Run the compliance API under uvicorn.

    python -m content_compliance.api.server --port 8080

Flags default to CONTENT_COMPLIANCE_API_HOST, CONTENT_COMPLIANCE_API_PORT and
CONTENT_COMPLIANCE_API_RELOAD. Supabase and audit settings are read by the
app factory itself (see `content_compliance.api.app`).
"""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

import uvicorn

APP_FACTORY = "content_compliance.api.app:create_app"


def _env_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the content compliance API.")
    parser.add_argument("--host", default=os.getenv("CONTENT_COMPLIANCE_API_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("CONTENT_COMPLIANCE_API_PORT", "8000")))
    parser.add_argument(
        "--reload",
        action="store_true",
        default=_env_bool(os.getenv("CONTENT_COMPLIANCE_API_RELOAD")),
        help="Restart on code changes (development only).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    uvicorn.run(APP_FACTORY, host=args.host, port=args.port, reload=args.reload, factory=True)


if __name__ == "__main__":
    main()
