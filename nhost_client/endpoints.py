"""
Endpoint resolution for Nhost services.
"""

from __future__ import annotations

from .addressing import AddressingStrategy, BySubdomain

PLATFORM_DOMAIN = "nhost.run"
API_VERSION = "v1"

AUTH = "auth"
STORAGE = "storage"
FUNCTIONS = "functions"
GRAPHQL = "graphql"

SERVICES = (AUTH, STORAGE, FUNCTIONS, GRAPHQL)


def create_service_endpoint(subdomain: str, region: str, service: str) -> str:
    """Build the hosted URL of ``service`` for a subdomain and region.

    An empty region addresses the local/self-hosted CLI deployment.
    """
    if service not in SERVICES:
        raise ValueError(f"Unknown Nhost service: {service}")
    host = f"{subdomain}.{service}.{region}" if region else f"{subdomain}.{service}"
    return f"https://{host}.{PLATFORM_DOMAIN}/{API_VERSION}"


def resolve_endpoint(addressing: AddressingStrategy, service: str) -> str:
    """Return the base URL of ``service`` under the given addressing strategy."""
    if service not in SERVICES:
        raise ValueError(f"Unknown Nhost service: {service}")

    if isinstance(addressing, BySubdomain):
        return create_service_endpoint(
            subdomain=addressing.subdomain.subdomain,
            region=addressing.subdomain.region,
            service=service,
        )

    return getattr(addressing.service_urls, f"{service}_url")
