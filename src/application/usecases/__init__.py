# Use Cases
from src.application.usecases.fetch_transcript import (
    FetchTranscriptUseCase,
    render_transcript,
    select_caption_track,
)
from src.application.usecases.fetch_url import FetchUrlConfig, FetchUrlUseCase

__all__ = [
    "FetchUrlUseCase",
    "FetchUrlConfig",
    "FetchTranscriptUseCase",
    "render_transcript",
    "select_caption_track",
]
