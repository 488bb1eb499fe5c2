"""Per-user busy flag for meal submissions."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from uuid import UUID

from calorie_cam.errors import SubmissionInProgressError


@dataclass
class SubmissionGuard:
    """Rejects a second submission while one is in flight for the same user."""

    _in_flight: set[UUID] = field(default_factory=set)

    @contextmanager
    def hold(self, user_id: UUID) -> Iterator[None]:
        """Mark the user busy for the duration of the block."""
        if user_id in self._in_flight:
            raise SubmissionInProgressError(
                "A meal is already being processed. Wait for it to finish."
            )
        self._in_flight.add(user_id)
        try:
            yield
        finally:
            self._in_flight.discard(user_id)

    def is_busy(self, user_id: UUID) -> bool:
        """Return True while a submission for the user is in flight."""
        return user_id in self._in_flight
