"""ユースケース: YouTube動画の字幕をタイムスタンプ付きで取得"""

from src.application.interfaces.caption_source import CaptionMetadataSource
from src.application.interfaces.http_fetcher import HttpFetcher
from src.domain.entities import CaptionTrack, CaptionTrackKind, Transcript
from src.domain.exceptions import NetworkError, NoTranscriptFoundError, PageParseError
from src.domain.time_utils import to_video_timestamp
from src.domain.timed_text import parse_timed_text
from src.domain.url_utils import resolve_video_id
from src.infrastructure.logging_config import LogContext, get_logger, trace_tool

logger = get_logger(__name__)


def _matches_language(track: CaptionTrack, lang: str) -> bool:
    """言語コードの一致判定（en は en-US にも一致、en-US は en-US のみ）"""
    code = track.language_code.lower()
    wanted = lang.lower()
    return code == wanted or code.split("-", 1)[0] == wanted


def select_caption_track(
    video_id: str,
    tracks: list[CaptionTrack],
    lang: str | None = None,
) -> CaptionTrack:
    """
    字幕トラックを1つ選択

    手動字幕を優先し、なければ自動生成字幕。同じ種類が複数あれば先頭。
    lang 指定時はその言語のトラックだけを候補にする。

    Raises:
        NoTranscriptFoundError: lang に一致するトラックがない
    """
    candidates = tracks
    if lang:
        candidates = [track for track in tracks if _matches_language(track, lang)]
        if not candidates:
            available = list(dict.fromkeys(track.language_code for track in tracks))
            raise NoTranscriptFoundError(video_id, lang, available)

    for kind in (CaptionTrackKind.STANDARD, CaptionTrackKind.AUTO_GENERATED):
        for track in candidates:
            if track.kind is kind:
                return track

    # tracks は空でない前提（CaptionMetadataSource が保証）
    raise NoTranscriptFoundError(video_id, lang or "any", [])


def render_transcript(transcript: Transcript) -> str:
    """ツール出力用のテキストに整形"""
    return "\n".join(
        [
            f"Video title: {transcript.title}",
            "Transcript:",
            *(
                f"[{to_video_timestamp(line.offset_ms, line.duration_ms)}] {line.text}"
                for line in transcript.lines
            ),
        ]
    )


class FetchTranscriptUseCase:
    """
    fetch_youtube_transcript ツールの本体

    1. URLまたはIDから動画IDを決定
    2. 字幕メタデータ（タイトル・トラック一覧）を取得
    3. トラック選択（手動 > 自動生成）
    4. 字幕データを取得してパース
    """

    def __init__(
        self,
        caption_source: CaptionMetadataSource,
        fetcher: HttpFetcher,
    ):
        self.caption_source = caption_source
        self.fetcher = fetcher

    @trace_tool(name="fetch_youtube_transcript")
    async def execute(self, url: str, lang: str | None = None) -> Transcript:
        """
        Args:
            url: 動画URLまたは動画ID
            lang: 優先する言語コード（None は言語を問わない）

        Returns:
            Transcript

        Raises:
            FetchMcpError のサブクラス（PageParseError, VideoUnavailableError,
            TranscriptsDisabledError, NoTranscriptFoundError, TooManyRequestsError,
            NetworkError）
        """
        video_id = resolve_video_id(url)
        ctx = LogContext(video_id=video_id, lang=lang)
        logger.info(f"[字幕] 取得開始 {ctx}")

        metadata = await self.caption_source.fetch_metadata(video_id)
        track = select_caption_track(video_id, metadata.tracks, lang)
        logger.debug(
            f"  選択: {track.language_code} {track.name!r} "
            f"({'自動生成' if track.is_auto_generated else '手動'})"
        )

        result = await self.fetcher.fetch(track.base_url)
        if not result.ok:
            raise NetworkError(
                f"Failed to fetch transcript track for video {video_id}: {result.status_code}"
            )

        try:
            lines = parse_timed_text(result.body)
        except ValueError as e:
            raise PageParseError(
                f"Transcript track for video {video_id} is malformed: {e}"
            ) from e
        if not lines:
            raise PageParseError(f"Transcript track for video {video_id} is empty")

        transcript = Transcript(
            video_id=video_id,
            title=metadata.title,
            lines=lines,
            language_code=track.language_code,
            is_auto_generated=track.is_auto_generated,
        )

        done_ctx = ctx.update(
            lines=len(lines),
            language=transcript.language_code,
            auto=transcript.is_auto_generated,
        )
        logger.info(f"[字幕] 取得成功 {done_ctx}")
        return transcript
