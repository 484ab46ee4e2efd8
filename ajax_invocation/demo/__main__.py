"""Run the demo page: ``python -m ajax_invocation.demo [--config ajax.json]``."""
import argparse
import logging

import uvicorn

from ..config import ConfigManager
from .pages import create_demo_app


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="AJAX invocation demo server")
    parser.add_argument("--config", default="ajax_invocation.json", help="JSON settings file")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = ConfigManager(args.config).load()
    if args.host is not None:
        config.http_host = args.host
    if args.port is not None:
        config.http_port = args.port

    valid, error = config.is_valid()
    if not valid:
        raise SystemExit(f"Invalid config: {error}")

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        "Demo listening on http://%s:%s/", config.http_host, config.http_port
    )
    uvicorn.run(
        create_demo_app(config),
        host=config.http_host,
        port=config.http_port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
