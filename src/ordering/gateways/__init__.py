"""Remote read gateway factory — cart, catalog and profile services.

Uses the in-memory fakes by default. In production, set
``ORDERING_GATEWAY_ADAPTER=http`` together with ``CART_SERVICE_URL``,
``CATALOG_SERVICE_URL``, ``PROFILE_SERVICE_URL`` and optionally
``UPSTREAM_TIMEOUT_SECONDS`` / ``UPSTREAM_RETRIES``.
"""

import os

from ordering.gateways.port import CartReader, CatalogReader, ProfileReader

_gateways: dict | None = None


def _build_from_environment() -> dict:
    adapter = os.environ.get("ORDERING_GATEWAY_ADAPTER", "fake")
    if adapter == "fake":
        from ordering.gateways.fake_adapter import FakeCartService, FakeCatalogService, FakeProfileService

        return {
            "cart": FakeCartService(),
            "catalog": FakeCatalogService(),
            "profile": FakeProfileService(),
        }
    if adapter == "http":
        from ordering.gateways.http_adapter import HttpCartService, HttpCatalogService, HttpProfileService

        timeout = float(os.environ.get("UPSTREAM_TIMEOUT_SECONDS", "5"))
        retries = int(os.environ.get("UPSTREAM_RETRIES", "0"))
        return {
            "cart": HttpCartService(os.environ["CART_SERVICE_URL"], timeout=timeout, retries=retries),
            "catalog": HttpCatalogService(os.environ["CATALOG_SERVICE_URL"], timeout=timeout, retries=retries),
            "profile": HttpProfileService(os.environ["PROFILE_SERVICE_URL"], timeout=timeout, retries=retries),
        }
    raise ValueError(f"Unknown gateway adapter: {adapter}")


def _current() -> dict:
    global _gateways
    if _gateways is None:
        _gateways = _build_from_environment()
    return _gateways


def get_cart_reader() -> CartReader:
    return _current()["cart"]


def get_catalog_reader() -> CatalogReader:
    return _current()["catalog"]


def get_profile_reader() -> ProfileReader:
    return _current()["profile"]


def set_gateways(
    cart: CartReader | None = None,
    catalog: CatalogReader | None = None,
    profile: ProfileReader | None = None,
) -> None:
    """Override one or more gateways (useful for tests)."""
    current = _current()
    if cart is not None:
        current["cart"] = cart
    if catalog is not None:
        current["catalog"] = catalog
    if profile is not None:
        current["profile"] = profile


def reset_gateways() -> None:
    """Drop the configured gateways; the next lookup rebuilds them from the environment."""
    global _gateways
    _gateways = None
