from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Optional, Union

from starlette.datastructures import Headers
from starlette.types import Scope

IPAddress = Union[IPv4Address, IPv6Address]


def parse_ip(value: Optional[str]) -> Optional[IPAddress]:
    if not value:
        return None

    value = value.strip()
    # bracketed IPv6 with port, e.g. "[::1]:8080"
    if value.startswith("["):
        value = value[1:].split("]", 1)[0]
    elif value.count(":") == 1:
        value = value.split(":", 1)[0]

    try:
        return ip_address(value)
    except ValueError:
        return None


def request_remote_address(scope: Scope, trust_forwarded_headers: bool = False) -> Optional[IPAddress]:
    """Best-effort client IP for a request, ``None`` when nothing parses."""
    if trust_forwarded_headers:
        headers = Headers(scope=scope)

        forwarded_for = headers.get("x-forwarded-for", "")
        if forwarded_for:
            ip = parse_ip(forwarded_for.split(",")[0])
            if ip is not None:
                return ip

        ip = parse_ip(headers.get("x-real-ip"))
        if ip is not None:
            return ip

    client = scope.get("client")
    if not client:
        return None

    return parse_ip(client[0])
