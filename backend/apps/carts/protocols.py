from __future__ import annotations

from typing import Optional, Protocol


class CartStorageProtocol(Protocol):
    def load(self) -> Optional[str]:
        """Return the serialized cart, ``None`` when nothing was saved."""
        ...

    def save(self, serialized: str) -> bool:
        """Persist the serialized cart and report success."""
        ...
