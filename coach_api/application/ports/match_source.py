"""Port (interface) for match history sources."""

from abc import ABC, abstractmethod
from typing import List, Tuple

from coaching.ingest import FetchMeta
from coaching.normalize import MatchRecord


class MatchSourcePort(ABC):
    """Port for fetching a player's recent matches."""

    @abstractmethod
    def fetch_matches(
        self,
        account_id: str,
        count: int,
    ) -> Tuple[List[MatchRecord], FetchMeta]:
        """Fetch the most recent matches for a player, newest first.

        Args:
            account_id: Steam32 account id
            count: Number of matches to fetch

        Returns:
            Tuple of (normalized matches, fetch metadata)

        Raises:
            ValueError: invalid account id or match count
            RuntimeError: the source could not be reached
        """
        ...


class ProgressCallbackPort(ABC):
    """Port for reporting progress during long operations."""

    @abstractmethod
    async def report_progress(
        self, progress: int, message: str, status: str = "processing"
    ) -> None:
        """Report progress update.

        Args:
            progress: Progress percentage (0-100)
            message: Human-readable status message
            status: Status type (connecting, processing, completed, error)
        """
        ...
