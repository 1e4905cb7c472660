"""字幕メタデータ取得インターフェース"""

from typing import Protocol

from src.domain.entities import CaptionMetadata


class CaptionMetadataSource(Protocol):
    """動画タイトルと字幕トラック一覧を取得するインターフェース"""

    async def fetch_metadata(self, video_id: str) -> CaptionMetadata:
        """
        動画の字幕メタデータを取得

        Args:
            video_id: YouTube動画ID

        Returns:
            CaptionMetadata（tracksは1件以上）

        Raises:
            PageParseError: 埋め込みデータが見つからない・壊れている
            VideoUnavailableError: 動画が利用不可
            TranscriptsDisabledError: 字幕トラックがない
            TooManyRequestsError: キャプチャを要求された
            NetworkError: 通信エラー
        """
        ...
