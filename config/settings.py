"""設定管理"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """アプリケーション設定"""

    # Server
    SERVER_NAME: str = "fetch-mcp"
    # stdio / sse / http
    TRANSPORT: Literal["stdio", "sse", "http"] = "stdio"
    HOST: str = "127.0.0.1"
    PORT: int = 3000
    # http トランスポートのエンドポイント
    HTTP_PATH: str = "/mcp"

    # HTTP
    HTTP_TIMEOUT: float = 30.0
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    # 視聴ページ取得時の言語（タイトル等の表示言語に影響）
    ACCEPT_LANGUAGE: str = "en-US,en;q=0.9"

    # fetch_url
    DEFAULT_MAX_LENGTH: int = 2000

    # 字幕メタデータの取得方法
    # watch_page: 視聴ページの埋め込みJSONを解析 / ytdlp: yt-dlp を使用
    CAPTION_SOURCE: Literal["watch_page", "ytdlp"] = "watch_page"

    # Logging & Observability
    LOG_LEVEL: str = "INFO"
    LANGSMITH_TRACING: bool = False
    LANGSMITH_API_KEY: str | None = None
    LANGSMITH_PROJECT: str = "fetch-mcp"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """シングルトンで設定を取得"""
    return Settings()
