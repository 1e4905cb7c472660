"""ユースケース: URLを取得し、正規化・ページングしたコンテンツを返す"""

import base64
from dataclasses import dataclass

from src.application.interfaces.html_converter import HtmlConverter
from src.application.interfaces.http_fetcher import HttpFetcher
from src.domain.entities import (
    ContentClassification,
    FetchResult,
    ImageBlock,
    PaginationWindow,
    ToolResponse,
    strip_mime_parameters,
)
from src.domain.url_utils import normalize_url
from src.infrastructure.logging_config import LogContext, get_logger, trace_tool

logger = get_logger(__name__)


@dataclass
class FetchUrlConfig:
    """ユースケースの設定"""

    default_max_length: int = 2000


class FetchUrlUseCase:
    """
    fetch_url ツールの本体

    1. URL正規化（スキームがなければ https://）
    2. 1回だけ取得（リトライなし）
    3. Content-Type で分類（画像 / 非対応 / HTML / テキスト）
    4. HTMLは raw=False のときMarkdownに変換
    5. start_index / max_length でページング
    """

    def __init__(
        self,
        fetcher: HttpFetcher,
        html_converter: HtmlConverter,
        config: FetchUrlConfig | None = None,
    ):
        self.fetcher = fetcher
        self.html_converter = html_converter
        self.config = config or FetchUrlConfig()

    @trace_tool(name="fetch_url")
    async def execute(
        self,
        url: str,
        raw: bool = False,
        max_length: int | None = None,
        start_index: int = 0,
    ) -> ToolResponse:
        """
        Args:
            url: 取得するURL
            raw: HTMLを変換せずそのまま返す
            max_length: 返す最大文字数（None は設定値）
            start_index: 返す範囲の開始位置

        Returns:
            ToolResponse（非成功ステータスは is_error=True、例外にはしない）

        Raises:
            NetworkError: 通信エラー（呼び出し側の境界で処理する）
            ValueError: start_index / max_length が負
        """
        if max_length is None:
            max_length = self.config.default_max_length
        window = PaginationWindow(start_index=start_index, max_length=max_length)

        resolved_url = normalize_url(url)
        ctx = LogContext(url=resolved_url, raw=raw, start_index=start_index, max_length=max_length)
        logger.info(f"[fetch_url] 取得開始 {ctx}")

        result = await self.fetcher.fetch(resolved_url)

        if not result.ok:
            logger.info(f"[fetch_url] 取得失敗: status={result.status_code} {ctx}")
            return ToolResponse.error(
                f"Failed to fetch {resolved_url}: {result.status_code}\n{result.body}"
            )

        classification = ContentClassification.from_content_type(result.content_type)
        logger.debug(f"  分類: {classification.value} (content-type={result.content_type!r})")

        if classification is ContentClassification.UNSUPPORTED_BINARY:
            return ToolResponse.text(f"Unsupported mime type: {result.content_type}")

        if classification is ContentClassification.IMAGE:
            return self._image_response(result)

        content = self._normalize(result, classification, raw)
        page = window.apply(content)

        logger.info(
            f"[fetch_url] 完了: {len(page.content)}文字, 残り{page.remaining_length}文字"
        )

        return ToolResponse.text(
            "\n".join(
                [
                    f"URL: {resolved_url}",
                    f"Start index: {start_index}",
                    f"Remaining content length: {page.remaining_length}",
                    f"Content: {page.content}",
                ]
            )
        )

    def _normalize(
        self,
        result: FetchResult,
        classification: ContentClassification,
        raw: bool,
    ) -> str:
        """HTMLは raw でなければMarkdownへ、それ以外は本文そのまま"""
        if classification is ContentClassification.HTML_TEXT and not raw:
            return self.html_converter.convert(result.body)
        return result.body

    def _image_response(self, result: FetchResult) -> ToolResponse:
        """画像はbase64のまま返す（テキスト変換なし）"""
        return ToolResponse(
            content=[
                ImageBlock(
                    data=base64.b64encode(result.raw_body).decode("ascii"),
                    mime_type=strip_mime_parameters(result.content_type or ""),
                )
            ]
        )
