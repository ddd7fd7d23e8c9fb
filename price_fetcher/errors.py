from __future__ import annotations


class FetchError(Exception):
    """Terminal failure to produce a quote for one symbol."""

    kind = "fetch_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamUnreachableError(FetchError):
    kind = "upstream_unreachable"


class UpstreamHttpError(FetchError):
    kind = "upstream_http_error"

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        detail = f"{status_code} {reason}".strip()
        super().__init__(f"HTTP error: {detail}")


class MalformedPayloadError(FetchError):
    kind = "malformed_upstream_payload"


class MissingFieldError(FetchError):
    kind = "missing_required_field"


class AllPricesFailedError(Exception):
    def __init__(self, failures: list[tuple[str, str]]) -> None:
        self.failures = list(failures)
        joined = ", ".join(f"{symbol}: {message}" for symbol, message in self.failures)
        super().__init__(f"Failed to fetch any prices. Errors: {joined}")

    @property
    def message(self) -> str:
        return str(self)


class ApiError(Exception):
    """Rendered by the app as ``{"error": code, "message": message}``."""

    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
