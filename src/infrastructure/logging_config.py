"""ロギング設定とLangSmithトレーシング統合"""

import inspect
import logging
import os
import sys
import uuid
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, TypeVar

from langsmith import traceable

# 型変数
F = TypeVar("F", bound=Callable[..., Any])

# ロガーのキャッシュ
_loggers: dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    名前付きロガーを取得

    Args:
        name: ロガー名（通常は __name__ を使用）

    Returns:
        設定済みのロガー
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    _loggers[name] = logger
    return logger


def setup_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
) -> None:
    """
    アプリケーション全体のロギングを設定

    stdout は stdio トランスポートのメッセージ用なので、ログは stderr に出す

    Args:
        level: ログレベル
        format_string: ログフォーマット文字列
    """
    if format_string is None:
        format_string = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
        force=True,
    )

    # 外部ライブラリのログレベルを調整
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("markdownify").setLevel(logging.WARNING)


def parse_log_level(value: str) -> int:
    """ログレベル名（DEBUG等）を数値に変換（不明な値はINFO）"""
    return getattr(logging, value.upper(), logging.INFO)


def is_langsmith_enabled() -> bool:
    """LangSmithが有効かどうかを確認"""
    # Settingsから値を取得（.envファイルを読み込む）
    try:
        from config.settings import get_settings

        settings = get_settings()
        return settings.LANGSMITH_TRACING and bool(settings.LANGSMITH_API_KEY)
    except Exception:
        # Settingsが使えない場合は環境変数から直接取得
        tracing_enabled = os.getenv("LANGSMITH_TRACING", "").lower() in ("true", "1", "yes")
        api_key_set = bool(os.getenv("LANGSMITH_API_KEY"))
        return tracing_enabled and api_key_set


def generate_trace_metadata() -> dict[str, Any]:
    """
    トレース用のメタデータを生成

    各トレースを一意に識別するためのセッションIDとタイムスタンプを含む
    """
    return {
        "session_id": str(uuid.uuid4())[:8],  # 短縮UUID
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def trace_tool(
    name: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> Callable[[F], F]:
    """
    ツール呼び出しをトレースするデコレータ

    LangSmithが無効の場合はパススルー
    各呼び出しで新しいrun_idを生成し、トレースが上書きされないようにする

    Args:
        name: トレース名（デフォルトは関数名）
        metadata: 追加メタデータ

    Example:
        @trace_tool(name="fetch_url")
        async def execute(self, url: str) -> ToolResponse:
            ...
    """

    def decorator(func: F) -> F:
        if not is_langsmith_enabled():
            return func

        def traced() -> Callable[..., Any]:
            # 毎回新しいrun_idとmetadataを生成
            combined_metadata = {
                **(metadata or {}),
                **generate_trace_metadata(),
            }
            return traceable(
                name=name or func.__name__,
                run_type="tool",
                metadata=combined_metadata,
                run_id=uuid.uuid4(),
            )(func)

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                return await traced()(*args, **kwargs)

            return async_wrapper  # type: ignore

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return traced()(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


class LogContext:
    """
    ログのコンテキスト情報を保持するヘルパー

    Example:
        ctx = LogContext(video_id="abc123", lang="en")
        logger.info(f"Processing {ctx}")
    """

    def __init__(self, **kwargs: Any):
        self._data = kwargs

    def __str__(self) -> str:
        parts = [f"{k}={v!r}" for k, v in self._data.items()]
        return " | ".join(parts)

    def update(self, **kwargs: Any) -> "LogContext":
        """新しいコンテキストを追加した新しいインスタンスを返す"""
        new_data = {**self._data, **kwargs}
        return LogContext(**new_data)
