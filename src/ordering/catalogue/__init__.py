"""Catalogue factory.

Provides get_catalogue() / set_catalogue() to swap implementations:
- FakeCatalogue for development and testing
- HttpCatalogue when CATALOGUE_ADAPTER=http
"""

from shared.config import get_settings

from ordering.catalogue.fake_adapter import FakeCatalogue
from ordering.catalogue.port import Catalogue

_current_catalogue: Catalogue | None = None


def get_catalogue() -> Catalogue:
    """Return the current catalogue. Defaults to FakeCatalogue."""
    global _current_catalogue
    if _current_catalogue is None:
        settings = get_settings()
        if settings.catalogue_adapter == "http":
            from ordering.catalogue.http_adapter import HttpCatalogue

            _current_catalogue = HttpCatalogue(settings.catalogue_url, timeout=settings.catalogue_timeout_seconds)
        else:
            _current_catalogue = FakeCatalogue()
    return _current_catalogue


def set_catalogue(catalogue: Catalogue) -> None:
    """Override the active catalogue (useful for tests)."""
    global _current_catalogue
    _current_catalogue = catalogue


def reset_catalogue() -> None:
    """Reset to default catalogue."""
    global _current_catalogue
    _current_catalogue = None
