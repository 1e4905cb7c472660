# Application Interfaces (Protocols)
from src.application.interfaces.caption_source import CaptionMetadataSource
from src.application.interfaces.html_converter import HtmlConverter
from src.application.interfaces.http_fetcher import HttpFetcher

__all__ = [
    "HttpFetcher",
    "HtmlConverter",
    "CaptionMetadataSource",
]
