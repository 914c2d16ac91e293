from __future__ import annotations

from typing import Any, Protocol


class CatalogSourceProtocol(Protocol):
    def fetch(self) -> Any:
        """Return the raw catalog payload or raise ``CatalogLoadError``."""
        ...
