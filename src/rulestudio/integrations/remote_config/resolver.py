"""
Remote configuration resolver.

Validates user-supplied configuration URLs, rewrites GitHub browser URLs to
their raw-content equivalents and fetches the configuration text over HTTPS.
"""

from enum import Enum
from urllib.parse import urlsplit, urlunsplit

import httpx
import structlog
import yaml

from rulestudio.core.config import config
from rulestudio.core.config.remote_config import RemoteConfigSettings
from rulestudio.core.errors import (
    HTTPStatusError,
    InsecureSchemeError,
    InvalidConfigContentError,
    InvalidURLError,
    NetworkError,
    UnsupportedSchemeError,
)
from rulestudio.core.utils import log_operation

logger = structlog.get_logger(__name__)

GITHUB_HOST = "github.com"
GITHUB_RAW_HOST = "raw.githubusercontent.com"
GIST_HOST = "gist.github.com"
GIST_RAW_HOST = "gist.githubusercontent.com"


class URLValidationResult(str, Enum):
    VALID = "valid"
    INSECURE_SCHEME = "insecure_scheme"
    UNSUPPORTED_SCHEME = "unsupported_scheme"
    INVALID = "invalid"


def validate_url(url: str) -> URLValidationResult:
    """Classify a URL by scheme and host. Pure; never touches the network."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return URLValidationResult.INVALID

    scheme = parts.scheme.lower()
    if not scheme:
        return URLValidationResult.INVALID
    if scheme == "http":
        return URLValidationResult.INSECURE_SCHEME
    if scheme != "https":
        return URLValidationResult.UNSUPPORTED_SCHEME
    if not parts.hostname:
        return URLValidationResult.INVALID
    return URLValidationResult.VALID


def resolve_to_raw_url(url: str) -> str:
    """
    Convert GitHub blob and Gist URLs to raw content URLs.

    github.com/<owner>/<repo>/blob/<ref>/<path> -> raw.githubusercontent.com/<owner>/<repo>/<ref>/<path>
    gist.github.com/<user>/<id>                 -> gist.githubusercontent.com/<user>/<id>/raw

    Any other URL is returned unchanged, so the function is idempotent.
    """
    parts = urlsplit(url)
    host = (parts.hostname or "").lower()
    segments = [s for s in parts.path.split("/") if s]

    if host == GITHUB_HOST and len(segments) >= 4 and segments[2] == "blob":
        owner, repo, _, ref, *rest = segments
        raw_path = "/" + "/".join([owner, repo, ref, *rest])
        return urlunsplit(("https", GITHUB_RAW_HOST, raw_path, parts.query, ""))

    if host == GIST_HOST and len(segments) >= 2:
        if segments[-1] == "raw" or "raw" in segments[2:3]:
            raw_path = "/" + "/".join(segments)
        else:
            raw_path = "/" + "/".join([*segments[:2], "raw"])
        return urlunsplit(("https", GIST_RAW_HOST, raw_path, parts.query, ""))

    return url


def check_config_text(text: str, url: str = "") -> None:
    """
    Minimal plausibility check: the text must parse as YAML and be a mapping
    (or an empty document).

    Raises:
        InvalidConfigContentError: If the check fails.
    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InvalidConfigContentError(url, str(e)) from e
    if document is not None and not isinstance(document, dict):
        raise InvalidConfigContentError(url, f"top level is {type(document).__name__}, expected a mapping")


class RemoteConfigResolver:
    """Fetches baseline lint configurations from HTTPS URLs."""

    def __init__(self, client: httpx.AsyncClient | None = None, settings: RemoteConfigSettings | None = None):
        self.settings = settings or config.remote_config
        self._client = client

    validate_url = staticmethod(validate_url)
    resolve_to_raw_url = staticmethod(resolve_to_raw_url)

    async def fetch_config(self, url: str) -> str:
        """
        Fetch configuration text from ``url``.

        Raises:
            InsecureSchemeError, UnsupportedSchemeError, InvalidURLError: Before any network I/O.
            NetworkError: On transport failures and timeouts.
            HTTPStatusError: On non-2xx responses.
            InvalidConfigContentError: If the body is not plausible configuration text.
        """
        validation = validate_url(url)
        if validation is URLValidationResult.INSECURE_SCHEME:
            raise InsecureSchemeError(url)
        if validation is URLValidationResult.UNSUPPORTED_SCHEME:
            raise UnsupportedSchemeError(url)
        if validation is not URLValidationResult.VALID:
            raise InvalidURLError(url)

        resolved = resolve_to_raw_url(url)
        async with log_operation("remote_config_fetch", subject_ids={"url": resolved}):
            body = await self._download(resolved)
            try:
                text = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidConfigContentError(resolved, "could not decode response as UTF-8 text") from e

            check_config_text(text, resolved)
            return text

    async def _download(self, url: str) -> bytes:
        try:
            if self._client is not None:
                return await self._read_body(self._client, url)
            async with httpx.AsyncClient(timeout=self.settings.timeout, follow_redirects=True) as client:
                return await self._read_body(client, url)
        except httpx.TimeoutException as e:
            raise NetworkError(url, f"request timed out after {self.settings.timeout} seconds") from e
        except httpx.HTTPError as e:
            raise NetworkError(url, str(e)) from e

    async def _read_body(self, client: httpx.AsyncClient, url: str) -> bytes:
        """Stream the response body, giving up as soon as it passes ``max_bytes``."""
        max_bytes = self.settings.max_bytes
        async with client.stream("GET", url, timeout=self.settings.timeout, follow_redirects=True) as response:
            if not 200 <= response.status_code < 300:
                logger.warning("Remote config fetch rejected", url=url, status_code=response.status_code)
                raise HTTPStatusError(url, response.status_code)

            declared = response.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > max_bytes:
                raise InvalidConfigContentError(url, f"response exceeds {max_bytes} bytes")

            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > max_bytes:
                    raise InvalidConfigContentError(url, f"response exceeds {max_bytes} bytes")
            return bytes(body)
