class SearchUIError(Exception):
    """Base for failures surfaced to the caller as {"error": message}."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class QueryValidationError(SearchUIError):
    status_code = 400


class UpstreamError(SearchUIError):
    status_code = 500
