"""httpx クライアントのテスト（MockTransport使用）"""

import httpx
import pytest

from src.domain.exceptions import NetworkError
from src.infrastructure.http_client import HttpxFetcher


def make_fetcher(handler) -> HttpxFetcher:
    return HttpxFetcher(
        timeout=5.0,
        user_agent="test-agent/1.0",
        transport=httpx.MockTransport(handler),
    )


class TestHttpxFetcher:
    """HttpxFetcherのテスト"""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                headers={"content-type": "text/plain; charset=utf-8"},
                content="héllo".encode("utf-8"),
            )

        result = await make_fetcher(handler).fetch(
            "https://example.com/a", headers={"Accept-Language": "ja"}
        )

        assert result.ok is True
        assert result.status_code == 200
        assert result.content_type == "text/plain; charset=utf-8"
        assert result.body == "héllo"
        assert result.raw_body == "héllo".encode("utf-8")
        assert seen[0].headers["User-Agent"] == "test-agent/1.0"
        assert seen[0].headers["Accept-Language"] == "ja"

    @pytest.mark.asyncio
    async def test_non_success_is_not_raised(self) -> None:
        """非成功ステータスは例外にせず ok=False"""
        result = await make_fetcher(lambda request: httpx.Response(404, text="Not Found")).fetch(
            "https://example.com/missing"
        )
        assert result.ok is False
        assert result.status_code == 404
        assert result.body == "Not Found"

    @pytest.mark.asyncio
    async def test_follows_redirects(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(301, headers={"location": "https://example.com/new"})
            return httpx.Response(200, text="moved")

        result = await make_fetcher(handler).fetch("https://example.com/old")

        assert result.body == "moved"
        assert result.url == "https://example.com/new"

    @pytest.mark.asyncio
    async def test_binary_body(self) -> None:
        payload = bytes(range(256))
        result = await make_fetcher(
            lambda request: httpx.Response(200, headers={"content-type": "image/png"}, content=payload)
        ).fetch("https://example.com/a.png")
        assert result.raw_body == payload

    @pytest.mark.asyncio
    async def test_connect_error(self) -> None:
        """通信エラーは NetworkError に変換"""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed", request=request)

        with pytest.raises(NetworkError, match="name resolution failed"):
            await make_fetcher(handler).fetch("https://nowhere.invalid")

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(NetworkError, match="timed out"):
            await make_fetcher(handler).fetch("https://slow.example.com")
