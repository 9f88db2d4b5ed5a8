"""Base adapter protocol for notification channels."""

from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from ..models import ChannelType, ReportData


@runtime_checkable
class NotificationAdapter(Protocol):
    """Protocol for notification channel adapters."""

    channel_type: ChannelType

    @property
    def is_enabled(self) -> bool:
        """Whether this channel is configured."""
        ...

    async def send(
        self,
        report: ReportData,
        report_paths: Optional[dict[str, Path]] = None,
    ) -> Any:
        """Deliver the report. Returns the channel's result, raises on failure."""
        ...
