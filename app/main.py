"""MCP サーバーエントリーポイント"""

import argparse
import sys
from pathlib import Path
from typing import Annotated

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# .envファイルを最初に読み込む（LangSmith等の環境変数を設定するため）
from dotenv import load_dotenv
load_dotenv(project_root / ".env")

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.types import ImageContent, TextContent
from pydantic import Field

from config.settings import Settings, get_settings
from src.application.interfaces.caption_source import CaptionMetadataSource
from src.application.usecases.fetch_transcript import FetchTranscriptUseCase, render_transcript
from src.application.usecases.fetch_url import FetchUrlConfig, FetchUrlUseCase
from src.domain.entities import ImageBlock, TextBlock, ToolResponse
from src.domain.exceptions import FetchMcpError
from src.infrastructure.http_client import HttpxFetcher
from src.infrastructure.logging_config import get_logger, parse_log_level, setup_logging
from src.infrastructure.markdown_converter import MarkdownifyConverter
from src.infrastructure.youtube_watch_page import WatchPageCaptionSource
from src.infrastructure.ytdlp_caption_source import YtdlpCaptionSource

__version__ = "1.0.0"

logger = get_logger(__name__)


def to_content_blocks(response: ToolResponse) -> list[TextContent | ImageContent]:
    """ToolResponse を MCP のコンテンツブロックに変換"""
    blocks: list[TextContent | ImageContent] = []
    for block in response.content:
        if isinstance(block, ImageBlock):
            blocks.append(ImageContent(type="image", data=block.data, mimeType=block.mime_type))
        elif isinstance(block, TextBlock):
            blocks.append(TextContent(type="text", text=block.text))
    return blocks


def to_tool_error(tool_name: str, error: Exception) -> ToolError:
    """
    例外をエラー応答（isError=True）に変換

    想定内（FetchMcpError）はINFO、想定外はスタックトレース付きで記録
    """
    if isinstance(error, FetchMcpError):
        logger.info(f"[{tool_name}] {type(error).__name__}: {error}")
    else:
        logger.exception(f"[{tool_name}] 予期しないエラー: {error!r}")
    return ToolError(str(error) or repr(error))


def create_server(
    fetch_url_usecase: FetchUrlUseCase,
    transcript_usecase: FetchTranscriptUseCase,
    name: str = "fetch-mcp",
    default_max_length: int = 2000,
) -> FastMCP:
    """ツールを登録した FastMCP サーバーを組み立て"""
    mcp = FastMCP(name=name, version=__version__)

    @mcp.tool(description="Fetch a URL, support HTML, text, and image")
    async def fetch_url(
        url: Annotated[str, Field(description="The URL to fetch")],
        raw: Annotated[
            bool, Field(description="Return raw HTML instead of Markdown for HTML pages")
        ] = False,
        max_length: Annotated[
            int, Field(ge=0, description="The max length of the content to return")
        ] = default_max_length,
        start_index: Annotated[
            int, Field(ge=0, description="The starting index of content to return")
        ] = 0,
    ):
        try:
            response = await fetch_url_usecase.execute(
                url=url,
                raw=raw,
                max_length=max_length,
                start_index=start_index,
            )
        except Exception as e:
            raise to_tool_error("fetch_url", e) from e

        if response.is_error:
            raise ToolError(response.joined_text)
        return to_content_blocks(response)

    @mcp.tool(description="Fetch transcript for a Youtube video URL")
    async def fetch_youtube_transcript(
        url: Annotated[str, Field(description="The Youtube video URL or video id")],
        lang: Annotated[
            str | None,
            Field(description="Preferred transcript language code, e.g. 'en' or 'ja'"),
        ] = None,
    ):
        try:
            transcript = await transcript_usecase.execute(url=url, lang=lang)
        except Exception as e:
            raise to_tool_error("fetch_youtube_transcript", e) from e

        return [TextContent(type="text", text=render_transcript(transcript))]

    return mcp


def build_caption_source(settings: Settings, fetcher: HttpxFetcher) -> CaptionMetadataSource:
    """設定に応じて字幕メタデータの取得方法を選択"""
    if settings.CAPTION_SOURCE == "ytdlp":
        return YtdlpCaptionSource(user_agent=settings.USER_AGENT, timeout=settings.HTTP_TIMEOUT)
    return WatchPageCaptionSource(fetcher=fetcher, accept_language=settings.ACCEPT_LANGUAGE)


def init_server(settings: Settings | None = None) -> FastMCP:
    """DIでユースケースを組み立ててサーバーを生成"""
    settings = settings or get_settings()

    fetcher = HttpxFetcher(timeout=settings.HTTP_TIMEOUT, user_agent=settings.USER_AGENT)

    return create_server(
        fetch_url_usecase=FetchUrlUseCase(
            fetcher=fetcher,
            html_converter=MarkdownifyConverter(),
            config=FetchUrlConfig(default_max_length=settings.DEFAULT_MAX_LENGTH),
        ),
        transcript_usecase=FetchTranscriptUseCase(
            caption_source=build_caption_source(settings, fetcher),
            fetcher=fetcher,
        ),
        name=settings.SERVER_NAME,
        default_max_length=settings.DEFAULT_MAX_LENGTH,
    )


def parse_args(argv: list[str] | None, settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fetch-mcp",
        description="MCP server for fetching URLs and YouTube transcripts",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "http"],
        default=settings.TRANSPORT,
        help="transport binding (default: %(default)s)",
    )
    parser.add_argument("--host", default=settings.HOST)
    parser.add_argument("--port", type=int, default=settings.PORT)
    parser.add_argument(
        "--path",
        default=settings.HTTP_PATH,
        help="endpoint path for the http transport (default: %(default)s)",
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    args = parse_args(argv, settings)

    # ロギング初期化
    setup_logging(level=parse_log_level(args.log_level))

    server = init_server(settings)
    logger.info(f"[server] {settings.SERVER_NAME} v{__version__} 起動 transport={args.transport}")

    if args.transport == "stdio":
        server.run(transport="stdio")
    elif args.transport == "sse":
        server.run(transport="sse", host=args.host, port=args.port)
    else:
        server.run(transport="http", host=args.host, port=args.port, path=args.path)


if __name__ == "__main__":
    main()
