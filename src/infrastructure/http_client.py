"""httpx による HTTP 取得クライアント"""

import httpx

from src.domain.entities import FetchResult
from src.domain.exceptions import NetworkError
from src.infrastructure.logging_config import get_logger

logger = get_logger(__name__)


class HttpxFetcher:
    """
    httpx.AsyncClient を使用した HttpFetcher 実装

    呼び出しごとにクライアントを生成し、どの終了経路でも接続を解放する。
    接続の再利用・キャッシュ・リトライは行わない。
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            timeout: リクエストタイムアウト（秒）
            user_agent: User-Agent ヘッダ
            transport: テスト用のトランスポート差し替え
        """
        self.timeout = timeout
        self.default_headers = {"User-Agent": user_agent} if user_agent else {}
        self._transport = transport

    async def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> FetchResult:
        """
        URLを取得（リダイレクトは追跡）

        Raises:
            NetworkError: 通信エラー・不正なURL
        """
        logger.debug(f"[HTTP] GET {url}")

        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.timeout,
                headers=self.default_headers,
                transport=self._transport,
            ) as client:
                response = await client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"[HTTP] タイムアウト: {url}")
            raise NetworkError(
                f"Request to {url} timed out after {self.timeout} seconds"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"[HTTP] 通信エラー: {url} - {e}")
            raise NetworkError(f"Failed to fetch {url}: {e}") from e

        logger.debug(
            f"  status={response.status_code}, "
            f"content-type={response.headers.get('content-type')!r}, "
            f"bytes={len(response.content)}"
        )

        return FetchResult(
            ok=response.is_success,
            status_code=response.status_code,
            content_type=response.headers.get("content-type"),
            raw_body=response.content,
            body=response.text,
            url=str(response.url),
        )
