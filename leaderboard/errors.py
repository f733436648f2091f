from typing import Optional


class LeaderboardError(Exception):
    """Base error carrying the HTTP status it maps to at the request boundary."""

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message if detail is None else f"{message}: {detail}")

    def to_dict(self) -> dict:
        payload = {'message': self.message}
        if self.detail is not None:
            payload['error'] = self.detail
        return payload


class StoreUnavailable(LeaderboardError):
    """Reading from the round store failed."""


class WriteFailed(LeaderboardError):
    """Inserting or updating a round was rejected by the store."""


class NotFound(LeaderboardError):
    status_code = 404


class ValidationFailure(LeaderboardError):
    status_code = 400
