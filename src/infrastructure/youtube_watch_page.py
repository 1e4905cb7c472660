"""視聴ページ埋め込みJSONによる字幕メタデータ取得"""

import json
import re
from typing import Any

from src.application.interfaces.http_fetcher import HttpFetcher
from src.domain.entities import CaptionMetadata, CaptionTrack, CaptionTrackKind
from src.domain.exceptions import (
    NetworkError,
    PageParseError,
    TooManyRequestsError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from src.domain.url_utils import watch_url
from src.infrastructure.logging_config import get_logger

logger = get_logger(__name__)

# var ytInitialPlayerResponse = {...};
_PLAYER_RESPONSE_PATTERN = re.compile(r"ytInitialPlayerResponse\s*=\s*(?=\{)")
_RECAPTCHA_MARKER = 'class="g-recaptcha"'


def extract_player_response(page_html: str) -> dict[str, Any]:
    """
    視聴ページのHTMLから ytInitialPlayerResponse を取り出してパース

    Raises:
        PageParseError: 代入式が見つからない、またはJSONとして不正
    """
    match = _PLAYER_RESPONSE_PATTERN.search(page_html)
    if not match:
        raise PageParseError("Transcript data not found for this video")

    try:
        player_response, _ = json.JSONDecoder().raw_decode(page_html, match.end())
    except json.JSONDecodeError as e:
        raise PageParseError(
            f"Transcript data not found for this video (malformed page data: {e.msg})"
        ) from e

    if not isinstance(player_response, dict):
        raise PageParseError("Transcript data not found for this video")
    return player_response


def parse_caption_metadata(video_id: str, player_response: dict[str, Any]) -> CaptionMetadata:
    """
    ytInitialPlayerResponse から タイトルと字幕トラック一覧を取り出す

    Raises:
        VideoUnavailableError: playabilityStatus が OK 以外
        TranscriptsDisabledError: 字幕トラックがない
    """
    playability = player_response.get("playabilityStatus") or {}
    status = playability.get("status", "OK")
    if status != "OK":
        reason = playability.get("reason") or _first_subreason(playability)
        logger.debug(f"[字幕] 再生不可: {video_id} status={status} reason={reason!r}")
        raise VideoUnavailableError(
            f"Video {video_id} is unavailable: {reason}" if reason
            else f"Video {video_id} is unavailable ({status})"
        )

    title = (player_response.get("videoDetails") or {}).get("title", "")

    renderer = (player_response.get("captions") or {}).get(
        "playerCaptionsTracklistRenderer"
    ) or {}
    tracks = [
        track
        for track in (_to_caption_track(raw) for raw in renderer.get("captionTracks", []))
        if track is not None
    ]

    if not tracks:
        raise TranscriptsDisabledError(
            f"Transcripts are disabled for video {video_id}: no captions available for this video"
        )

    return CaptionMetadata(video_id=video_id, title=title, tracks=tracks)


def _to_caption_track(raw: dict[str, Any]) -> CaptionTrack | None:
    base_url = raw.get("baseUrl")
    language_code = raw.get("languageCode")
    if not base_url or not language_code:
        return None

    name_obj = raw.get("name") or {}
    name = name_obj.get("simpleText") or "".join(
        run.get("text", "") for run in name_obj.get("runs", [])
    )
    kind = (
        CaptionTrackKind.AUTO_GENERATED
        if raw.get("kind") == "asr"
        else CaptionTrackKind.STANDARD
    )
    return CaptionTrack(
        language_code=language_code,
        base_url=base_url,
        kind=kind,
        name=name,
    )


def _first_subreason(playability: dict[str, Any]) -> str:
    """errorScreen 内の補足理由（runs 形式）を取り出す"""
    renderer = (playability.get("errorScreen") or {}).get("playerErrorMessageRenderer") or {}
    subreason = renderer.get("subreason") or {}
    if "simpleText" in subreason:
        return subreason["simpleText"]
    return "".join(run.get("text", "") for run in subreason.get("runs", []))


class WatchPageCaptionSource:
    """
    視聴ページの ytInitialPlayerResponse から字幕メタデータを取得

    CaptionMetadataSource 実装（デフォルト）
    """

    def __init__(self, fetcher: HttpFetcher, accept_language: str = "en-US,en;q=0.9"):
        """
        Args:
            fetcher: HTTP取得クライアント
            accept_language: 視聴ページ取得時の Accept-Language
        """
        self.fetcher = fetcher
        self.accept_language = accept_language

    async def fetch_metadata(self, video_id: str) -> CaptionMetadata:
        url = watch_url(video_id)
        logger.debug(f"[字幕] 視聴ページ取得: {url}")

        result = await self.fetcher.fetch(url, headers={"Accept-Language": self.accept_language})
        if not result.ok:
            raise NetworkError(f"Failed to fetch {url}: {result.status_code}")

        if _RECAPTCHA_MARKER in result.body:
            raise TooManyRequestsError(
                "YouTube is receiving too many requests from this IP "
                "and now requires solving a captcha to continue"
            )

        player_response = extract_player_response(result.body)
        metadata = parse_caption_metadata(video_id, player_response)

        logger.debug(
            f"  タイトル={metadata.title!r}, "
            f"トラック={[(t.language_code, t.kind.value) for t in metadata.tracks]}"
        )
        return metadata
