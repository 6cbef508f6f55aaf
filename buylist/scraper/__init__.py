"""Card Buylist — Image Fetch Strategies"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from buylist.config import ContextKind, settings
from buylist.models.image import ImageRecord


class ImageFetchError(Exception):
    """Raised by a strategy that cannot run at all (e.g. browser launch failed)."""

    def __init__(self, strategy: str, message: str):
        self.strategy = strategy
        super().__init__(f"{strategy}: {message}")


class ExecutionContext(BaseModel):
    """
    Capabilities of the runtime the strategies are built for.

    Injected into strategy constructors instead of probing the environment.
    """
    kind: ContextKind = ContextKind.SERVER
    static_base_url: str | None = None

    @property
    def supports_browser(self) -> bool:
        return self.kind is ContextKind.CLIENT

    @property
    def supports_static_assets(self) -> bool:
        return self.kind is ContextKind.CLIENT and bool(self.static_base_url)

    @classmethod
    def from_settings(cls) -> ExecutionContext:
        return cls(
            kind=settings.EXECUTION_CONTEXT,
            static_base_url=settings.STATIC_BASE_URL or None,
        )


class FetchStrategy(ABC):
    """One independent way of retrieving image metadata."""

    name: str = "abstract"

    @abstractmethod
    async def fetch(self) -> list[ImageRecord]:
        """
        Retrieve image records.

        Returns [] when the source is unavailable or produced nothing.
        May raise ImageFetchError; never any other exception.
        """
