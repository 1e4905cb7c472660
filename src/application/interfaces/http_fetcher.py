"""HTTP取得インターフェース"""

from typing import Protocol

from src.domain.entities import FetchResult


class HttpFetcher(Protocol):
    """HTTP取得のインターフェース"""

    async def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> FetchResult:
        """
        URLを1回だけ取得（リトライなし）

        Args:
            url: 取得するURL
            headers: 追加のリクエストヘッダ

        Returns:
            FetchResult（非成功ステータスも例外にせず返す）

        Raises:
            NetworkError: DNS, TLS, タイムアウト等の通信エラー
        """
        ...
