# Infrastructure Layer
from src.infrastructure.http_client import HttpxFetcher
from src.infrastructure.markdown_converter import MarkdownifyConverter
from src.infrastructure.youtube_watch_page import WatchPageCaptionSource
from src.infrastructure.ytdlp_caption_source import YtdlpCaptionSource

__all__ = [
    "HttpxFetcher",
    "MarkdownifyConverter",
    "WatchPageCaptionSource",
    "YtdlpCaptionSource",
]
