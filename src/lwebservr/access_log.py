"""
=============================================================================
ACCESS LOGGING
=============================================================================

One line per handled request, on the "lwebservr.access" logger:

    GET /index.html from 127.0.0.1 -> 200 OK
    GET /missing.txt from 127.0.0.1 -> 404 Not Found
    POST / from 127.0.0.1 -> 405 Method not allowed

The method is logged as the client sent it (not uppercased).

With verbose on, the raw request text follows the line.

The logger is namespaced so it can be routed on its own:

    logging.getLogger("lwebservr.access").addHandler(file_handler)

=============================================================================
"""

import logging
from dataclasses import dataclass

from .http.request import ParsedRequest
from .http.response import HttpOutcome


logger = logging.getLogger("lwebservr.access")


@dataclass
class RequestLog:
    """Log entry for one request."""

    method: str
    path: str
    client_ip: str
    status_code: int
    status_message: str

    def to_text(self) -> str:
        return (
            f"{self.method} /{self.path} from {self.client_ip} "
            f"-> {self.status_code} {self.status_message}"
        )


class AccessLog:
    """
    Emits access log lines for handled requests.

        access_log = AccessLog(silent=False, verbose=True)
        access_log.log(request, outcome, "127.0.0.1")

    silent suppresses the one-line summary. verbose adds the raw request
    dump; the two are independent.
    """

    def __init__(self, silent: bool = False, verbose: bool = False, log_level: int = logging.INFO):
        self.silent = silent
        self.verbose = verbose
        self.log_level = log_level

    def log(self, request: ParsedRequest, outcome: HttpOutcome, client_ip: str):
        if not self.silent:
            entry = RequestLog(
                method=request.method,
                path=request.path,
                client_ip=client_ip,
                status_code=int(outcome.status),
                status_message=outcome.status_message,
            )
            logger.log(self.log_level, entry.to_text())

        if self.verbose:
            logger.log(self.log_level, request.raw)
