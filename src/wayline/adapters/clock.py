"""System clock adapter."""

from datetime import UTC, datetime

from wayline.domain.contracts.clock import ClockProtocol


class SystemClock(ClockProtocol):
    """Clock reading the system time in UTC."""

    def now(self) -> datetime:
        """Return the current time in UTC."""
        return datetime.now(UTC)
