import httpx
import pytest
import respx
from httpx import Response

from rulestudio.core.config.remote_config import RemoteConfigSettings
from rulestudio.core.errors import (
    HTTPStatusError,
    InsecureSchemeError,
    InvalidConfigContentError,
    InvalidURLError,
    NetworkError,
    UnsupportedSchemeError,
)
from rulestudio.integrations.remote_config import (
    RemoteConfigResolver,
    URLValidationResult,
    resolve_to_raw_url,
    validate_url,
)

BLOB_URL = "https://github.com/realm/SwiftLint/blob/main/.swiftlint.yml"
RAW_URL = "https://raw.githubusercontent.com/realm/SwiftLint/main/.swiftlint.yml"
CONFIG_TEXT = "disabled_rules:\n  - force_cast\nline_length: 120\n"


class TestValidateURL:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://example.com/.swiftlint.yml", URLValidationResult.VALID),
            ("HTTPS://Example.com/config.yml", URLValidationResult.VALID),
            ("http://example.com/.swiftlint.yml", URLValidationResult.INSECURE_SCHEME),
            ("ftp://example.com/.swiftlint.yml", URLValidationResult.UNSUPPORTED_SCHEME),
            ("file:///etc/passwd", URLValidationResult.UNSUPPORTED_SCHEME),
            ("example.com/.swiftlint.yml", URLValidationResult.INVALID),
            ("not a url", URLValidationResult.INVALID),
            ("", URLValidationResult.INVALID),
            ("https://", URLValidationResult.INVALID),
        ],
    )
    def test_classification(self, url, expected):
        assert validate_url(url) is expected

    def test_exposed_on_resolver(self):
        assert RemoteConfigResolver.validate_url("https://example.com/x.yml") is URLValidationResult.VALID


class TestResolveToRawURL:
    def test_github_blob(self):
        assert resolve_to_raw_url(BLOB_URL) == RAW_URL

    def test_github_blob_nested_path(self):
        url = "https://github.com/org/repo/blob/v1.2/configs/lint/.swiftlint.yml"

        assert resolve_to_raw_url(url) == "https://raw.githubusercontent.com/org/repo/v1.2/configs/lint/.swiftlint.yml"

    def test_gist(self):
        assert resolve_to_raw_url("https://gist.github.com/octocat/abc123") == (
            "https://gist.githubusercontent.com/octocat/abc123/raw"
        )

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/.swiftlint.yml",
            "https://github.com/realm/SwiftLint",
            "https://github.com/realm/SwiftLint/tree/main/Source",
            RAW_URL,
            "https://gist.githubusercontent.com/octocat/abc123/raw",
        ],
    )
    def test_other_urls_unchanged(self, url):
        assert resolve_to_raw_url(url) == url

    @pytest.mark.parametrize("url", [BLOB_URL, "https://gist.github.com/octocat/abc123", "https://example.com/a.yml"])
    def test_idempotent(self, url):
        once = resolve_to_raw_url(url)

        assert resolve_to_raw_url(once) == once


class TestFetchConfig:
    @respx.mock
    @pytest.mark.asyncio
    async def test_fetches_resolved_url(self):
        route = respx.get(RAW_URL).mock(return_value=Response(200, text=CONFIG_TEXT))

        text = await RemoteConfigResolver().fetch_config(BLOB_URL)

        assert text == CONFIG_TEXT
        assert route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_empty_document_is_accepted(self):
        respx.get("https://example.com/empty.yml").mock(return_value=Response(200, text=""))

        assert await RemoteConfigResolver().fetch_config("https://example.com/empty.yml") == ""

    @respx.mock
    @pytest.mark.asyncio
    async def test_uses_injected_client(self):
        respx.get("https://example.com/.swiftlint.yml").mock(return_value=Response(200, text=CONFIG_TEXT))

        async with httpx.AsyncClient() as client:
            text = await RemoteConfigResolver(client=client).fetch_config("https://example.com/.swiftlint.yml")

        assert text == CONFIG_TEXT

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_2xx_status(self):
        respx.get(RAW_URL).mock(return_value=Response(404, text="Not Found"))

        with pytest.raises(HTTPStatusError) as exc_info:
            await RemoteConfigResolver().fetch_config(BLOB_URL)

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == RAW_URL

    @respx.mock
    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["key: [unclosed\n  other: : :", "- just\n- a list\n", "plain scalar"])
    async def test_implausible_content(self, body):
        respx.get("https://example.com/.swiftlint.yml").mock(return_value=Response(200, text=body))

        with pytest.raises(InvalidConfigContentError):
            await RemoteConfigResolver().fetch_config("https://example.com/.swiftlint.yml")

    @respx.mock
    @pytest.mark.asyncio
    async def test_oversized_body(self):
        respx.get("https://example.com/.swiftlint.yml").mock(return_value=Response(200, text="a: 1\n" * 100))
        resolver = RemoteConfigResolver(settings=RemoteConfigSettings(max_bytes=64))

        with pytest.raises(InvalidConfigContentError):
            await resolver.fetch_config("https://example.com/.swiftlint.yml")

    @respx.mock
    @pytest.mark.asyncio
    async def test_oversized_stream_stops_reading(self):
        chunks_sent = []

        async def body():
            for index in range(1000):
                chunks_sent.append(index)
                yield b"#" * 1024

        respx.get("https://example.com/.swiftlint.yml").mock(side_effect=lambda request: Response(200, content=body()))
        resolver = RemoteConfigResolver(settings=RemoteConfigSettings(max_bytes=4096))

        with pytest.raises(InvalidConfigContentError) as exc_info:
            await resolver.fetch_config("https://example.com/.swiftlint.yml")

        assert "4096" in str(exc_info.value)
        assert len(chunks_sent) <= 5

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_utf8_body(self):
        respx.get("https://example.com/.swiftlint.yml").mock(return_value=Response(200, content=b"\xff\xfe\x00bad"))

        with pytest.raises(InvalidConfigContentError):
            await RemoteConfigResolver().fetch_config("https://example.com/.swiftlint.yml")

    @respx.mock
    @pytest.mark.asyncio
    async def test_transport_failure(self):
        respx.get("https://example.com/.swiftlint.yml").mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(NetworkError):
            await RemoteConfigResolver().fetch_config("https://example.com/.swiftlint.yml")

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout(self):
        respx.get("https://example.com/.swiftlint.yml").mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(NetworkError) as exc_info:
            await RemoteConfigResolver().fetch_config("https://example.com/.swiftlint.yml")

        assert "timed out" in str(exc_info.value)

    @respx.mock(assert_all_called=False)
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "url, error",
        [
            ("http://example.com/.swiftlint.yml", InsecureSchemeError),
            ("ftp://example.com/.swiftlint.yml", UnsupportedSchemeError),
            ("example.com/.swiftlint.yml", InvalidURLError),
        ],
    )
    async def test_rejected_urls_never_reach_network(self, url, error):
        route = respx.route().mock(return_value=Response(200, text=CONFIG_TEXT))

        with pytest.raises(error):
            await RemoteConfigResolver().fetch_config(url)

        assert not route.called
