"""Core interfaces for the schemagraph framework."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Type

from schemagraph.core.models import Resolved


class DocumentFetcher(ABC):
    """Abstract interface for retrieving schema documents by address."""

    @abstractmethod
    async def fetch(self, address: str) -> Resolved:
        """
        Fetch and parse the document at an address.

        Returns:
            Resolved pair of the parsed document (or `{}`) and the error, if any.
            Implementations must not raise for transport or parse failures.
        """
        pass

    async def fetch_all(self, addresses: Iterable[str]) -> Dict[str, Resolved]:
        """Fetch several documents concurrently."""
        ordered = list(dict.fromkeys(addresses))
        results = await asyncio.gather(*(self.fetch(address) for address in ordered))
        return dict(zip(ordered, results))

    async def aclose(self) -> None:
        """Release any held resources."""
        pass

    async def __aenter__(self) -> "DocumentFetcher":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: object,
    ) -> None:
        await self.aclose()
