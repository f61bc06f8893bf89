"""
Minimal webhook endpoint that authenticates Up Bank deliveries.

Register it with ``upbank add webhook https://<your-host>/`` and start it with
the secret key printed on registration.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from http.server import BaseHTTPRequestHandler, HTTPServer

from upbank.webhook import handle_webhook_request

SECRET_KEY_ENV_VAR = "UPBANK_WEBHOOK_SECRET"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Receive Up Bank webhook events")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8080, help="Port to listen on (default: 8080)")
    parser.add_argument(
        "--secret-key",
        default=None,
        help=f"Webhook secret key (default: ${SECRET_KEY_ENV_VAR})",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    return parser.parse_args()


def make_handler(secret_key: str) -> type:
    class WebhookHandler(BaseHTTPRequestHandler):
        def _dispatch(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length else b""
            reply = handle_webhook_request(self.command, dict(self.headers), body, secret_key)
            payload = reply.body.encode("utf-8")
            self.send_response(reply.status)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        do_GET = _dispatch
        do_POST = _dispatch
        do_PUT = _dispatch
        do_DELETE = _dispatch

        def log_message(self, format: str, *args: object) -> None:
            logging.info("%s %s", self.address_string(), format % args)

    return WebhookHandler


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    secret_key = args.secret_key or os.environ.get(SECRET_KEY_ENV_VAR, "")
    if not secret_key.strip():
        logging.error("No webhook secret key given via --secret-key or %s", SECRET_KEY_ENV_VAR)
        return 1

    server = HTTPServer((args.host, args.port), make_handler(secret_key))
    logging.info("Listening for Up Bank webhooks on %s:%s", args.host, args.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logging.info("Shutting down")
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
