"""Error taxonomy for the quote proxy.

Public errors carry the HTTP status and the short code written to the client
as ``{"error": code}``. Upstream and configuration errors never reach the
client directly; route handlers log them and raise ``ServerError`` instead.
"""

from typing import Any, Optional


class QuoteProxyError(Exception):
    """Base class for errors rendered to the storefront caller."""

    status_code: int = 500
    error: str = "server_error"

    def __init__(self, error: Optional[str] = None):
        if error is not None:
            self.error = error
        super().__init__(self.error)


class InvalidSignature(QuoteProxyError):
    status_code = 401
    error = "invalid_signature"


class MissingParameter(QuoteProxyError):
    status_code = 400

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"missing {name}")


class MalformedParameter(QuoteProxyError):
    status_code = 400

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"bad {name}")


class NotFound(QuoteProxyError):
    status_code = 404
    error = "not_found"


class ServerError(QuoteProxyError):
    status_code = 500
    error = "server_error"


# ---------------------------------------------------------------------------
# Internal failures
# ---------------------------------------------------------------------------

class ConfigurationError(RuntimeError):
    """A setting required for the upstream call is missing."""


class UpstreamError(RuntimeError):
    """The Shopify Admin API call failed."""


class UpstreamHttpError(UpstreamError):
    def __init__(self, status_code: Optional[int], body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"[AdminAPI] HTTP {status_code}: {body}")


class UpstreamGraphQLError(UpstreamError):
    def __init__(self, errors: list[Any]):
        self.errors = errors
        messages = [
            e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors
        ]
        super().__init__(f"[AdminAPI] GraphQL errors: {'; '.join(messages)}")
