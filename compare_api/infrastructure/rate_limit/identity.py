"""Client identity resolution for rate limiting."""

from typing import Mapping, Optional

UNKNOWN_CLIENT = "unknown"
DEV_CLIENT = "dev-user"


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None:
        # Plain dicts are case-sensitive; Starlette Headers are not.
        value = headers.get(name.title())
    value = (value or "").strip()
    return value or None


def resolve_client_identity(headers: Mapping[str, str], development: bool = False) -> str:
    """Pick the client IP from trusted proxy headers.

    Priority order:
    1. cf-connecting-ip (edge provided)
    2. x-real-ip
    3. First entry of x-forwarded-for

    Args:
        headers: Request headers
        development: Use a fixed identity so local requests share one key

    Returns:
        Client identity string, "unknown" when no header is present
    """
    if development:
        return DEV_CLIENT

    edge_ip = _header(headers, "cf-connecting-ip")
    if edge_ip:
        return edge_ip

    real_ip = _header(headers, "x-real-ip")
    if real_ip:
        return real_ip

    forwarded = _header(headers, "x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    return UNKNOWN_CLIENT
