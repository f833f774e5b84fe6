"""
Backend addressing strategies.

A client reaches its services either through the hosted platform's
subdomain/region convention or through four explicitly configured URLs.
Exactly one of the two is used for the lifetime of a client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from shared.errors import ConfigurationError


@dataclass(frozen=True)
class Subdomain:
    """Project subdomain and region from the Nhost project page.

    For local development pass ``"local"`` as the subdomain and leave the
    region empty.
    """

    subdomain: str
    region: str = ""


@dataclass(frozen=True)
class ServiceUrls:
    """Explicit service URLs of a self-hosted deployment."""

    auth_url: str
    storage_url: str
    functions_url: str
    graphql_url: str


@dataclass(frozen=True)
class BySubdomain:
    """Service URLs synthesized from a subdomain and region."""

    subdomain: Subdomain


@dataclass(frozen=True)
class ByServiceUrls:
    """Service URLs taken verbatim from configuration."""

    service_urls: ServiceUrls


AddressingStrategy = Union[BySubdomain, ByServiceUrls]


def from_subdomain(subdomain: str, region: str = "") -> BySubdomain:
    """Build a subdomain-based addressing strategy."""
    if not subdomain:
        raise ConfigurationError("Subdomain must not be empty")
    return BySubdomain(Subdomain(subdomain=subdomain, region=region or ""))


def from_service_urls(
    auth_url: str,
    storage_url: str,
    functions_url: str,
    graphql_url: str,
) -> ByServiceUrls:
    """Build an explicit-URL addressing strategy."""
    urls = ServiceUrls(
        auth_url=auth_url,
        storage_url=storage_url,
        functions_url=functions_url,
        graphql_url=graphql_url,
    )
    missing = [name for name, value in vars(urls).items() if not value]
    if missing:
        raise ConfigurationError(
            "All four service URLs are required",
            details={"missing": missing}
        )
    return ByServiceUrls(urls)


def from_options(
    addressing: Optional[AddressingStrategy] = None,
    subdomain: Optional[Subdomain] = None,
    service_urls: Optional[ServiceUrls] = None,
) -> AddressingStrategy:
    """Pick the single addressing strategy among the supplied options.

    Raises ConfigurationError when none or more than one was supplied.
    """
    supplied = [
        name for name, value in (
            ("addressing", addressing),
            ("subdomain", subdomain),
            ("service_urls", service_urls),
        )
        if value is not None
    ]
    if len(supplied) != 1:
        raise ConfigurationError(
            "You have to pass either a Subdomain or ServiceUrls",
            details={"supplied": supplied}
        )

    if addressing is not None:
        if not isinstance(addressing, (BySubdomain, ByServiceUrls)):
            raise ConfigurationError(
                f"Unsupported addressing strategy: {type(addressing).__name__}"
            )
        return addressing
    if subdomain is not None:
        if not isinstance(subdomain, Subdomain):
            raise ConfigurationError(
                f"subdomain must be a Subdomain, got {type(subdomain).__name__}"
            )
        return from_subdomain(subdomain.subdomain, subdomain.region)
    if not isinstance(service_urls, ServiceUrls):
        raise ConfigurationError(
            f"service_urls must be a ServiceUrls, got {type(service_urls).__name__}"
        )
    return from_service_urls(
        service_urls.auth_url,
        service_urls.storage_url,
        service_urls.functions_url,
        service_urls.graphql_url,
    )
