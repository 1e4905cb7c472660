# Domain Layer
from src.domain.entities import (
    CaptionMetadata,
    CaptionTrack,
    CaptionTrackKind,
    ContentClassification,
    FetchResult,
    ImageBlock,
    PaginatedContent,
    PaginationWindow,
    TextBlock,
    ToolResponse,
    Transcript,
    TranscriptLine,
)
from src.domain.exceptions import (
    FetchMcpError,
    NetworkError,
    NoTranscriptFoundError,
    PageParseError,
    TooManyRequestsError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)

__all__ = [
    "FetchResult",
    "ContentClassification",
    "PaginationWindow",
    "PaginatedContent",
    "CaptionTrackKind",
    "CaptionTrack",
    "CaptionMetadata",
    "TranscriptLine",
    "Transcript",
    "TextBlock",
    "ImageBlock",
    "ToolResponse",
    "FetchMcpError",
    "NetworkError",
    "PageParseError",
    "VideoUnavailableError",
    "TranscriptsDisabledError",
    "NoTranscriptFoundError",
    "TooManyRequestsError",
]
