from __future__ import annotations

import ipaddress
from typing import Callable, Mapping

SKIP_PATHS = (
    "/health",
    "/ready",
    "/metrics",
    "/docs",
    "/api-docs",
    "/swagger",
    "/openapi.json",
    "/favicon.ico",
)

PUBLIC_AUTH_PATHS = (
    "/auth/login",
    "/auth/register",
    "/auth/forgot-password",
    "/auth/reset-password",
    "/auth/verify-email",
)


def _strip_prefix(path: str, api_prefix: str) -> str:
    if api_prefix and path.startswith(api_prefix):
        return path[len(api_prefix):] or "/"
    return path


def should_skip_tenant_resolution(path: str) -> bool:
    return any(path.startswith(skip_path) for skip_path in SKIP_PATHS)


def is_public_endpoint(path: str, api_prefix: str = "") -> bool:
    relative = _strip_prefix(path, api_prefix)
    return any(relative.startswith(public_path) for public_path in PUBLIC_AUTH_PATHS)


def _is_ip_address(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


def extract_subdomain(host: str) -> str | None:
    hostname = host.split(":", 1)[0]
    if _is_ip_address(hostname):
        return None
    parts = hostname.split(".")
    if len(parts) > 2 and parts[0]:
        return parts[0]
    return None


def extract_custom_domain(host: str, custom_domains: Mapping[str, str]) -> str | None:
    hostname = host.split(":", 1)[0].lower()
    return custom_domains.get(hostname)


def extract_tenant_identifier(
    headers: Mapping[str, str],
    host: str,
    query: Mapping[str, str],
    *,
    custom_domains: Mapping[str, str] | None = None,
    token_tenant: Callable[[], str | None] | None = None,
) -> str | None:
    """First match wins: header, subdomain, custom domain, query, verified token.

    ``token_tenant`` is only called when every other source came up empty; it
    must return ``None`` for a token that does not verify.
    """
    header_tenant = headers.get("x-tenant-id")
    if header_tenant:
        return header_tenant

    subdomain = extract_subdomain(host or "")
    if subdomain:
        return subdomain

    custom_domain = extract_custom_domain(host or "", custom_domains or {})
    if custom_domain:
        return custom_domain

    query_tenant = query.get("tenant")
    if query_tenant:
        return query_tenant

    if token_tenant is not None:
        return token_tenant() or None
    return None


def extract_sector_identifier(
    headers: Mapping[str, str],
    query: Mapping[str, str],
    path: str,
    *,
    sector_keywords: tuple[str, ...] | list[str] = ("pos", "warehouse"),
) -> str | None:
    header_sector = headers.get("x-sector-id")
    if header_sector:
        return header_sector

    query_sector = query.get("sector")
    if query_sector:
        return query_sector

    for segment in path.split("/"):
        if segment in sector_keywords:
            return segment
    return None
