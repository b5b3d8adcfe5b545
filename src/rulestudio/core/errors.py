"""
Core error classes for Rule Studio.
"""


class RuleStudioError(Exception):
    """Base class for all Rule Studio errors."""

    pass


# --- Catalog ---


class CacheReadError(RuleStudioError):
    """Raised when the rule cache snapshot is missing or corrupt."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read rule cache at {path}: {reason}")


class CatalogUnavailableError(RuleStudioError):
    """Raised when neither the lint tool nor the cache can provide the rule catalog."""

    def __init__(self, failures: list[tuple[str, Exception]]) -> None:
        self.failures = failures
        details = "; ".join(f"{source}: {error}" for source, error in failures)
        super().__init__(f"Rule catalog unavailable ({details})")

    def _error_from(self, source: str) -> Exception | None:
        return next((error for name, error in self.failures if name == source), None)

    @property
    def live_error(self) -> Exception | None:
        return self._error_from("live")

    @property
    def cache_error(self) -> Exception | None:
        return self._error_from("cache")


# --- External lint tool ---


class ExternalToolError(RuleStudioError):
    """Raised when the lint tool cannot be spawned or exits with a failure."""

    def __init__(self, message: str, exit_code: int | None = None, stderr: str = "") -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(message)


class ToolNotFoundError(ExternalToolError):
    """Raised when the lint tool executable cannot be located."""

    pass


class ToolTimeoutError(ExternalToolError):
    """Raised when the lint tool does not finish within the configured timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Lint tool timed out after {timeout} seconds")


class InvocationOutputMalformedError(RuleStudioError):
    """Raised when the lint tool output is not structurally parseable."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Malformed lint tool output: {reason}")


# --- Simulation ---


class BaselineConfigInvalidError(RuleStudioError):
    """Raised when a baseline configuration file cannot be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid baseline configuration {path}: {reason}")


# --- Remote configuration ---


class RemoteConfigError(RuleStudioError):
    """Base class for remote configuration errors."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class InsecureSchemeError(RemoteConfigError):
    """Raised for plaintext http URLs."""

    def __init__(self, url: str) -> None:
        super().__init__(url, f"Only HTTPS URLs are supported: {url}")


class UnsupportedSchemeError(RemoteConfigError):
    """Raised for URL schemes other than https."""

    def __init__(self, url: str) -> None:
        super().__init__(url, f"Unsupported URL scheme: {url}")


class InvalidURLError(RemoteConfigError):
    """Raised when a URL has no scheme or no host."""

    def __init__(self, url: str) -> None:
        super().__init__(url, f"The URL is not valid: {url}")


class HTTPStatusError(RemoteConfigError):
    """Raised when the remote server answers with a non-2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(url, f"HTTP error {status_code} fetching {url}")


class NetworkError(RemoteConfigError):
    """Raised when the request fails at the transport level."""

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(url, f"Network error fetching {url}: {reason}")


class InvalidConfigContentError(RemoteConfigError):
    """Raised when fetched content is not a plausible lint configuration."""

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(url, f"The fetched content is not a usable configuration: {reason}")
