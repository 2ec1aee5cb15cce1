class MatchApiError(Exception):
    """Base for errors rendered as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(MatchApiError):
    status_code = 400


class MatchNotFound(MatchApiError):
    status_code = 404
