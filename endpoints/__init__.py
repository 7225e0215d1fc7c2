# endpoints/__init__.py
import enum

from endpoints.noria import noria_router
from endpoints.original import original_router
from endpoints.router import PageRouter, RequestRouter
from errors import ConfigurationError


class Variant(enum.Enum):
    ORIGINAL = "original"
    NORIA = "noria"
    NATURAL = "natural"   # declared, no queries written for it yet


ROUTERS = {
    Variant.ORIGINAL: original_router,
    Variant.NORIA:    noria_router,
}


def get_variant(name: str) -> PageRouter:
    """Look up the router for a query variant, failing fast on bad config."""
    try:
        variant = Variant(name)
    except ValueError:
        known = ", ".join(v.value for v in Variant)
        raise ConfigurationError(f"unknown query variant {name!r} (expected one of: {known})") from None
    if variant not in ROUTERS:
        raise ConfigurationError(f"query variant {name!r} is not implemented")
    return ROUTERS[variant].check()


__all__ = [
    "Variant", "ROUTERS", "get_variant",
    "PageRouter", "RequestRouter",
]
