"""fetch_youtube_transcript ユースケースのテスト"""

import pytest

from src.application.usecases.fetch_transcript import (
    FetchTranscriptUseCase,
    render_transcript,
    select_caption_track,
)
from src.domain.entities import (
    CaptionMetadata,
    CaptionTrack,
    CaptionTrackKind,
    Transcript,
    TranscriptLine,
)
from src.domain.exceptions import (
    NetworkError,
    NoTranscriptFoundError,
    PageParseError,
    TranscriptsDisabledError,
)
from tests.fakes import FakeCaptionSource, FakeHttpFetcher, make_result

VIDEO_ID = "abc12345678"

EN_AUTO = CaptionTrack("en", "https://captions.test/en-asr", CaptionTrackKind.AUTO_GENERATED)
EN_MANUAL = CaptionTrack("en", "https://captions.test/en", CaptionTrackKind.STANDARD)
JA_MANUAL = CaptionTrack("ja", "https://captions.test/ja", CaptionTrackKind.STANDARD)
PT_BR_AUTO = CaptionTrack("pt-BR", "https://captions.test/pt-br", CaptionTrackKind.AUTO_GENERATED)

SRV1 = (
    '<transcript><text start="0" dur="1.5">Hello</text>'
    '<text start="61.2" dur="2">it&amp;#39;s me</text>'
    '<text start="3661" dur="1">later</text></transcript>'
)


class TestSelectCaptionTrack:
    """トラック選択のテスト"""

    def test_prefers_standard(self) -> None:
        """手動字幕を自動生成より優先"""
        assert select_caption_track(VIDEO_ID, [EN_AUTO, JA_MANUAL, EN_MANUAL]) is JA_MANUAL

    def test_falls_back_to_auto(self) -> None:
        assert select_caption_track(VIDEO_ID, [PT_BR_AUTO, EN_AUTO]) is PT_BR_AUTO

    def test_language_preference(self) -> None:
        """言語指定時はその言語の中で手動を優先"""
        tracks = [JA_MANUAL, EN_AUTO, EN_MANUAL]
        assert select_caption_track(VIDEO_ID, tracks, lang="en") is EN_MANUAL

    def test_language_primary_subtag(self) -> None:
        """pt は pt-BR にも一致"""
        assert select_caption_track(VIDEO_ID, [JA_MANUAL, PT_BR_AUTO], lang="pt") is PT_BR_AUTO
        assert select_caption_track(VIDEO_ID, [JA_MANUAL, PT_BR_AUTO], lang="PT-br") is PT_BR_AUTO

    def test_language_not_found(self) -> None:
        with pytest.raises(NoTranscriptFoundError, match="available: ja, en") as exc_info:
            select_caption_track(VIDEO_ID, [JA_MANUAL, EN_AUTO, EN_MANUAL], lang="fr")
        assert exc_info.value.available == ["ja", "en"]


class TestRenderTranscript:
    def test_render(self) -> None:
        transcript = Transcript(
            video_id=VIDEO_ID,
            title="My Video",
            lines=[
                TranscriptLine("Hello", 0, 1500),
                TranscriptLine("later", 3661000, 1000),
            ],
        )
        assert render_transcript(transcript) == (
            "Video title: My Video\nTranscript:\n[0:00] Hello\n[1:01:01] later"
        )


class TestFetchTranscriptUseCase:
    """FetchTranscriptUseCaseのテスト"""

    @pytest.mark.asyncio
    async def test_success(self, fake_fetcher: FakeHttpFetcher) -> None:
        source = FakeCaptionSource(CaptionMetadata(VIDEO_ID, "My Video", [EN_AUTO, EN_MANUAL]))
        fake_fetcher.add(EN_MANUAL.base_url, make_result(SRV1, content_type="text/xml"))
        usecase = FetchTranscriptUseCase(caption_source=source, fetcher=fake_fetcher)

        transcript = await usecase.execute(f"https://youtu.be/{VIDEO_ID}")

        assert source.calls == [VIDEO_ID]
        assert fake_fetcher.calls == [(EN_MANUAL.base_url, None)]
        assert transcript.title == "My Video"
        assert transcript.language_code == "en"
        assert transcript.is_auto_generated is False
        assert [line.text for line in transcript.lines] == ["Hello", "it's me", "later"]
        assert [line.offset_ms for line in transcript.lines] == pytest.approx([0, 61200, 3661000])

    @pytest.mark.asyncio
    async def test_logs_selected_track(
        self, fake_fetcher: FakeHttpFetcher, caplog: pytest.LogCaptureFixture
    ) -> None:
        """選択したトラックの名前・言語・種類がログに残る"""
        named = CaptionTrack(
            "en", "https://captions.test/named", CaptionTrackKind.AUTO_GENERATED, name="English (auto)"
        )
        source = FakeCaptionSource(CaptionMetadata(VIDEO_ID, "t", [named]))
        fake_fetcher.add(named.base_url, make_result(SRV1))

        with caplog.at_level("DEBUG", logger="src.application.usecases.fetch_transcript"):
            await FetchTranscriptUseCase(source, fake_fetcher).execute(VIDEO_ID)

        assert "'English (auto)'" in caplog.text
        assert "language='en'" in caplog.text
        assert "auto=True" in caplog.text

    @pytest.mark.asyncio
    async def test_bare_id(self, fake_fetcher: FakeHttpFetcher) -> None:
        """URLでなければIDとしてそのまま使う"""
        source = FakeCaptionSource(CaptionMetadata("some-raw-id", "t", [EN_AUTO]))
        fake_fetcher.add(EN_AUTO.base_url, make_result(SRV1))

        transcript = await FetchTranscriptUseCase(source, fake_fetcher).execute("some-raw-id")

        assert source.calls == ["some-raw-id"]
        assert transcript.is_auto_generated is True

    @pytest.mark.asyncio
    async def test_disabled_propagates(self, fake_fetcher: FakeHttpFetcher) -> None:
        """メタデータ取得の失敗はそのまま伝播し、字幕は取得しない"""
        source = FakeCaptionSource(TranscriptsDisabledError("Transcripts are disabled"))

        with pytest.raises(TranscriptsDisabledError):
            await FetchTranscriptUseCase(source, fake_fetcher).execute(VIDEO_ID)
        assert fake_fetcher.calls == []

    @pytest.mark.asyncio
    async def test_track_fetch_failure(self, fake_fetcher: FakeHttpFetcher) -> None:
        source = FakeCaptionSource(CaptionMetadata(VIDEO_ID, "t", [EN_MANUAL]))
        fake_fetcher.add(EN_MANUAL.base_url, make_result("", status_code=429))

        with pytest.raises(NetworkError, match="429"):
            await FetchTranscriptUseCase(source, fake_fetcher).execute(VIDEO_ID)

    @pytest.mark.asyncio
    async def test_empty_track(self, fake_fetcher: FakeHttpFetcher) -> None:
        source = FakeCaptionSource(CaptionMetadata(VIDEO_ID, "t", [EN_MANUAL]))
        fake_fetcher.add(EN_MANUAL.base_url, make_result(""))

        with pytest.raises(PageParseError, match="empty"):
            await FetchTranscriptUseCase(source, fake_fetcher).execute(VIDEO_ID)

    @pytest.mark.asyncio
    async def test_malformed_track(self, fake_fetcher: FakeHttpFetcher) -> None:
        source = FakeCaptionSource(CaptionMetadata(VIDEO_ID, "t", [EN_MANUAL]))
        fake_fetcher.add(EN_MANUAL.base_url, make_result('{"events": ['))

        with pytest.raises(PageParseError, match="malformed"):
            await FetchTranscriptUseCase(source, fake_fetcher).execute(VIDEO_ID)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body,message",
        [
            ('{"events": [null]}', "empty"),
            ('{"events": "x"}', "malformed"),
            ('{"events": [{"tStartMs": {}, "segs": [{"utf8": "x"}]}]}', "malformed"),
        ],
    )
    async def test_unexpected_json3_shape(
        self, fake_fetcher: FakeHttpFetcher, body: str, message: str
    ) -> None:
        """構造が想定外の json3 も PageParseError になる"""
        source = FakeCaptionSource(CaptionMetadata(VIDEO_ID, "t", [EN_MANUAL]))
        fake_fetcher.add(EN_MANUAL.base_url, make_result(body))

        with pytest.raises(PageParseError, match=message):
            await FetchTranscriptUseCase(source, fake_fetcher).execute(VIDEO_ID)

    @pytest.mark.asyncio
    async def test_language_not_found(self, fake_fetcher: FakeHttpFetcher) -> None:
        source = FakeCaptionSource(CaptionMetadata(VIDEO_ID, "t", [EN_MANUAL]))

        with pytest.raises(NoTranscriptFoundError):
            await FetchTranscriptUseCase(source, fake_fetcher).execute(VIDEO_ID, lang="de")
        assert fake_fetcher.calls == []
