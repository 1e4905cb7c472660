"""ドメイン固有の例外定義"""


class FetchMcpError(Exception):
    """基底例外クラス"""

    pass


class NetworkError(FetchMcpError):
    """通信エラー（DNS, TLS, タイムアウト, 非成功ステータス等）"""

    pass


class PageParseError(FetchMcpError):
    """視聴ページから字幕データを取り出せない"""

    pass


class VideoUnavailableError(FetchMcpError):
    """動画が利用不可（非公開・削除・年齢制限等）"""

    pass


class TranscriptsDisabledError(FetchMcpError):
    """字幕が無効"""

    pass


class NoTranscriptFoundError(FetchMcpError):
    """指定言語の字幕が見つからない"""

    def __init__(self, video_id: str, language: str, available: list[str]):
        self.video_id = video_id
        self.language = language
        self.available = available
        available_text = ", ".join(available) if available else "none"
        super().__init__(
            f"No transcript found for language {language!r} in video {video_id} "
            f"(available: {available_text})"
        )


class TooManyRequestsError(FetchMcpError):
    """YouTube からキャプチャを要求された"""

    pass
