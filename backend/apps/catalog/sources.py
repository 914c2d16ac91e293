from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Union

from apps.common import get_logger
from apps.common.exceptions import CatalogLoadError

logger = get_logger(__name__).bind(component="catalog", layer="source")


class JsonFileCatalogSource:
    """Reads the catalog from a JSON document on disk (``data/products.json``)."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def fetch(self) -> Any:
        logger.debug("Reading catalog file", path=str(self.path))
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except OSError as exc:
            raise CatalogLoadError(
                "Catalog file could not be read",
                details={"path": str(self.path), "reason": exc.strerror or str(exc)},
            ) from exc
        except ValueError as exc:
            # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise CatalogLoadError(
                "Catalog file is not valid JSON",
                details={"path": str(self.path), "reason": str(exc)},
            ) from exc


class StaticCatalogSource:
    """Serves an in-memory payload; each fetch returns an independent copy."""

    def __init__(self, payload: Any):
        self.payload = payload

    def fetch(self) -> Any:
        return copy.deepcopy(self.payload)
