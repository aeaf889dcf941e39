"""Protocol for background cache maintenance."""

from typing import Protocol


class CacheSweeperProtocol(Protocol):
    """Periodic task that evicts expired cache entries."""

    async def start(self) -> None:
        """Start the sweeper."""
        ...

    async def stop(self) -> None:
        """Stop the sweeper."""
        ...
