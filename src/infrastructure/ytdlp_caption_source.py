"""yt-dlp ベースの字幕メタデータ取得"""

import asyncio
from typing import Any

import yt_dlp

from src.domain.entities import CaptionMetadata, CaptionTrack, CaptionTrackKind
from src.domain.exceptions import (
    NetworkError,
    TooManyRequestsError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from src.domain.url_utils import watch_url
from src.infrastructure.logging_config import get_logger

logger = get_logger(__name__)

# json3 形式を優先（タイムスタンプが正確）
PREFERRED_FORMATS = ["json3", "srv3", "srv1", "vtt", "ttml"]

_UNAVAILABLE_MARKERS = (
    "Private video",
    "Video unavailable",
    "This video is unavailable",
    "Sign in to confirm your age",
    "age-restricted",
    "members-only",
)


class YtdlpCaptionSource:
    """
    yt-dlp を使用した CaptionMetadataSource 実装

    視聴ページの構造変化に強い代替経路。
    extract_info はブロッキングなのでワーカースレッドで実行する。
    """

    def __init__(self, user_agent: str | None = None, timeout: float = 30.0) -> None:
        # yt-dlp のオプション（メタデータ取得のみ）
        self.ydl_opts: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            "writesubtitles": False,  # ファイル書き出しはしない
            "writeautomaticsub": False,
            "socket_timeout": timeout,
        }
        if user_agent:
            self.ydl_opts["http_headers"] = {"User-Agent": user_agent}

    async def fetch_metadata(self, video_id: str) -> CaptionMetadata:
        logger.debug(f"[字幕] yt-dlp メタデータ取得: {video_id}")
        info = await asyncio.to_thread(self._extract_info, video_id)
        return self._to_metadata(video_id, info)

    def _extract_info(self, video_id: str) -> dict[str, Any]:
        try:
            with yt_dlp.YoutubeDL(self.ydl_opts) as ydl:
                info = ydl.extract_info(watch_url(video_id), download=False)
        except yt_dlp.utils.DownloadError as e:
            error_msg = str(e)
            if any(marker in error_msg for marker in _UNAVAILABLE_MARKERS):
                logger.debug(f"[字幕] 動画が利用不可: {video_id}")
                raise VideoUnavailableError(f"Video {video_id} is unavailable: {error_msg}") from e
            if "HTTP Error 429" in error_msg:
                raise TooManyRequestsError(
                    f"YouTube is receiving too many requests from this IP: {error_msg}"
                ) from e
            logger.error(f"[字幕] ダウンロードエラー: {video_id} - {e}")
            raise NetworkError(f"Failed to fetch video info for {video_id}: {error_msg}") from e

        if not info:
            raise VideoUnavailableError(f"Video {video_id} is unavailable")
        return info

    def _to_metadata(self, video_id: str, info: dict[str, Any]) -> CaptionMetadata:
        # 手動字幕と自動生成字幕を取得
        manual_subs = info.get("subtitles") or {}
        auto_subs = info.get("automatic_captions") or {}

        logger.debug(
            f"  利用可能な字幕: 手動={list(manual_subs)}, 自動={list(auto_subs)}"
        )

        tracks = [
            *self._to_tracks(manual_subs, CaptionTrackKind.STANDARD),
            *self._to_tracks(auto_subs, CaptionTrackKind.AUTO_GENERATED),
        ]
        if not tracks:
            raise TranscriptsDisabledError(
                f"Transcripts are disabled for video {video_id}: no captions available for this video"
            )

        return CaptionMetadata(
            video_id=video_id,
            title=info.get("title") or "",
            tracks=tracks,
        )

    def _to_tracks(
        self,
        subs: dict[str, list[dict[str, Any]]],
        kind: CaptionTrackKind,
    ) -> list[CaptionTrack]:
        """
        言語ごとの形式一覧から、優先形式のURLを1つ選んでトラック化

        subs は {"en": [{"url": "...", "ext": "json3"}, ...]} の形式
        """
        tracks = []
        for lang, formats in subs.items():
            # 自動翻訳（URLに tlang= を含む）は元トラックではないので除外
            originals = [f for f in formats if "tlang=" not in f.get("url", "")]
            url = self._pick_format_url(originals)
            if not url:
                continue
            name = next((f.get("name") for f in originals if f.get("name")), "")
            tracks.append(
                CaptionTrack(
                    language_code=lang.removesuffix("-orig"),
                    base_url=url,
                    kind=kind,
                    name=name,
                )
            )
        return tracks

    def _pick_format_url(self, formats: list[dict[str, Any]]) -> str | None:
        for fmt in PREFERRED_FORMATS:
            for sub_info in formats:
                if sub_info.get("ext") == fmt and sub_info.get("url"):
                    return sub_info["url"]
        return None
