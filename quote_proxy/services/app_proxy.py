"""
Shopify App Proxy signature verification.

Shopify signs every request it forwards through an App Proxy with the app's
shared secret. Two schemes are in the wild:

- a base64 HMAC-SHA256 of the request target (path plus query string) sent in
  ``X-Shopify-Proxy-Signature`` or ``X-Shopify-Hmac-Sha256``. Depending on how
  the proxy was registered, the signed target may or may not carry the
  ``/apps`` mount prefix, so both variants are tried.
- the legacy hex HMAC-SHA256 of the sorted query parameters, passed as the
  ``signature`` query parameter.

Verification is a pure function of the request parts and the secret. Each
scheme is a strategy returning accept/reject; the first acceptance wins.
"""

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional

from quote_proxy.utils.logger import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADERS = ("x-shopify-proxy-signature", "x-shopify-hmac-sha256")
LEGACY_SIGNATURE_PARAM = "signature"
APPS_PREFIX = "/apps"


@dataclass(frozen=True)
class ProxyRequest:
    """The request parts a signature is computed over."""

    headers: dict[str, str]
    raw_path: str
    query_params: tuple[tuple[str, str], ...]

    @property
    def header_signature(self) -> Optional[str]:
        for name in SIGNATURE_HEADERS:
            value = self.headers.get(name)
            if value:
                return value
        return None

    @property
    def legacy_signature(self) -> Optional[str]:
        for key, value in self.query_params:
            if key == LEGACY_SIGNATURE_PARAM:
                return value or None
        return None


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def safe_equal(a: str, b: str) -> bool:
    """Constant-time comparison of two strings' UTF-8 bytes.

    Any failure (wrong types, unencodable input) counts as a mismatch.
    """
    try:
        return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
    except (AttributeError, TypeError, UnicodeError):
        return False


def sign_path(secret: str, message: str) -> str:
    """Return base64(HMAC-SHA256(secret, message))."""
    digest = hmac.new(
        secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def legacy_message(params: Iterable[tuple[str, str]]) -> str:
    """Build the string the legacy scheme signs.

    ``signature`` is dropped, repeated keys are joined with ``,`` and pairs are
    concatenated as ``key=value`` in key order with no separator.
    """
    grouped: dict[str, list[str]] = {}
    for key, value in params:
        if key == LEGACY_SIGNATURE_PARAM:
            continue
        grouped.setdefault(key, []).append(value)
    return "".join(f"{key}={','.join(grouped[key])}" for key in sorted(grouped))


def sign_params(secret: str, params: Iterable[tuple[str, str]]) -> str:
    """Return the legacy hex HMAC-SHA256 over ``params``."""
    return hmac.new(
        secret.encode("utf-8"),
        legacy_message(params).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def apps_prefixed(raw_path: str) -> str:
    """Prefix a request target with the ``/apps`` mount point."""
    separator = "" if raw_path.startswith("/") else "/"
    return f"{APPS_PREFIX}{separator}{raw_path}"


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def _header_direct(request: ProxyRequest, secret: str) -> bool:
    signature = request.header_signature
    if not signature:
        return False
    return safe_equal(signature, sign_path(secret, request.raw_path))


def _header_apps_prefixed(request: ProxyRequest, secret: str) -> bool:
    signature = request.header_signature
    if not signature:
        return False
    return safe_equal(signature, sign_path(secret, apps_prefixed(request.raw_path)))


def _legacy_query_signature(request: ProxyRequest, secret: str) -> bool:
    signature = request.legacy_signature
    if not signature:
        return False
    return safe_equal(signature, sign_params(secret, request.query_params))


STRATEGIES: list[tuple[str, Callable[[ProxyRequest, str], bool]]] = [
    ("header", _header_direct),
    ("header_apps_prefix", _header_apps_prefixed),
    ("legacy_signature", _legacy_query_signature),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def _normalize_params(query_params: Any) -> tuple[tuple[str, str], ...]:
    if query_params is None:
        return ()
    if hasattr(query_params, "multi_items"):
        return tuple(query_params.multi_items())
    if isinstance(query_params, Mapping):
        return tuple(query_params.items())
    return tuple((key, value) for key, value in query_params)


def verify(
    headers: Mapping[str, str],
    raw_path: str,
    query_params: Any,
    shared_secret: Optional[str],
) -> bool:
    """
    Decide whether a proxied request carries a valid App Proxy signature.

    Args:
        headers: Request headers (any case).
        raw_path: The original path and query string, byte-for-byte as received.
        query_params: Query parameters as a mapping, a Starlette ``QueryParams``
            or an iterable of ``(key, value)`` pairs.
        shared_secret: The App Proxy shared secret. Empty or ``None`` rejects.

    Returns:
        True if any signature scheme matches.
    """
    if not shared_secret:
        logger.warning("App proxy shared secret not configured; rejecting request")
        return False

    request = ProxyRequest(
        headers={str(k).lower(): v for k, v in (headers or {}).items()},
        raw_path=raw_path or "",
        query_params=_normalize_params(query_params),
    )

    for name, strategy in STRATEGIES:
        if strategy(request, shared_secret):
            logger.debug("App proxy signature accepted", scheme=name)
            return True

    return False


def request_target(scope: Mapping[str, Any]) -> str:
    """Rebuild the raw request target (path and query) from an ASGI scope.

    Uses ``raw_path`` so percent-encoding is kept exactly as the client sent
    it; falls back to ``path`` when the server does not provide it.
    """
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("utf-8", errors="replace")
    else:
        path = scope.get("path", "")
    query = scope.get("query_string", b"")
    if isinstance(query, bytes):
        query = query.decode("utf-8", errors="replace")
    return f"{path}?{query}" if query else path
