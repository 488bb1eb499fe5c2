"""Error taxonomy shared by services, adapters and the HTTP layer.

Every error carries a user-facing ``message`` and the HTTP status the API
reports it with. Failures the pipeline recovers from are turned into an
``IngestionResult`` instead of reaching the HTTP layer.
"""


class CalorieCamError(Exception):
    """Base class for application errors."""

    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable payload for API responses."""
        return {"message": self.message}

    def __str__(self) -> str:
        return self.message


class ValidationError(CalorieCamError):
    """Input was rejected before any network call was made."""

    http_status = 400


class AuthenticationError(ValidationError):
    """No authenticated user, or credentials were rejected."""

    http_status = 401


class NotFoundError(CalorieCamError):
    """A requested row does not exist or is not owned by the caller."""

    http_status = 404


class SubmissionInProgressError(CalorieCamError):
    """A meal submission for the same user is still in flight."""

    http_status = 409


class ExternalServiceError(CalorieCamError):
    """Classification or nutrition lookup call failed."""

    http_status = 502

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        if status_code is not None:
            detail = f"{service} {status_code}: {message}"
        else:
            detail = f"{service}: {message}"
        super().__init__(detail)
        self.service = service
        self.status_code = status_code
        self.body = body

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable payload for API responses."""
        return {
            "message": self.message,
            "service": self.service,
            "status_code": self.status_code,
        }


class PersistenceError(CalorieCamError):
    """Inserting a meal log row failed; the remaining batch was aborted."""

    http_status = 500

    def __init__(self, food_name: str, detail: str, saved_count: int = 0) -> None:
        super().__init__(f"Failed to save {food_name}: {detail}")
        self.food_name = food_name
        self.detail = detail
        self.saved_count = saved_count

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable payload for API responses."""
        return {
            "message": self.message,
            "food_name": self.food_name,
            "saved_count": self.saved_count,
        }
