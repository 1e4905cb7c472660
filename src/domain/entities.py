"""ドメインエンティティ定義"""

from dataclasses import dataclass
from enum import Enum

# テキストとして扱う application/* の MIME タイプ
_TEXTUAL_APPLICATION_TYPES = frozenset(
    {
        "application/json",
        "application/xml",
        "application/javascript",
        "application/ecmascript",
        "application/x-javascript",
        "application/x-www-form-urlencoded",
        "application/ld+json",
    }
)


def strip_mime_parameters(content_type: str) -> str:
    """Content-Type から charset 等のパラメータを除いた MIME タイプを返す"""
    return content_type.split(";", 1)[0].strip().lower()


@dataclass(frozen=True)
class FetchResult:
    """HTTP取得結果（1回の呼び出しで使い捨て）"""

    ok: bool
    status_code: int
    content_type: str | None
    raw_body: bytes
    body: str
    url: str = ""


class ContentClassification(Enum):
    """Content-Type に基づくレスポンス分類"""

    IMAGE = "image"
    UNSUPPORTED_BINARY = "unsupported_binary"
    HTML_TEXT = "html_text"
    PLAIN_TEXT = "plain_text"

    @classmethod
    def from_content_type(cls, content_type: str | None) -> "ContentClassification":
        """
        宣言された Content-Type だけから分類を決定

        Args:
            content_type: Content-Type ヘッダ値（なければNone）

        Returns:
            ContentClassification
        """
        if not content_type:
            return cls.UNSUPPORTED_BINARY

        mime = strip_mime_parameters(content_type)

        if mime.startswith("image/"):
            return cls.IMAGE
        if "html" in mime and (mime.startswith("text/") or mime.endswith("+xml")):
            return cls.HTML_TEXT
        if mime.startswith("text/"):
            return cls.PLAIN_TEXT
        if (
            mime in _TEXTUAL_APPLICATION_TYPES
            or mime.endswith("+json")
            or mime.endswith("+xml")
        ):
            return cls.PLAIN_TEXT
        return cls.UNSUPPORTED_BINARY


@dataclass(frozen=True)
class PaginatedContent:
    """ページング適用後のコンテンツ"""

    content: str
    remaining_length: int


@dataclass(frozen=True)
class PaginationWindow:
    """返却するコンテンツの範囲（開始位置と最大長）を表す値オブジェクト"""

    start_index: int = 0
    max_length: int = 2000

    def __post_init__(self) -> None:
        if self.start_index < 0:
            raise ValueError("start_index must be non-negative")
        if self.max_length < 0:
            raise ValueError("max_length must be non-negative")

    def apply(self, text: str) -> PaginatedContent:
        """
        [start_index:] で切り出した後、max_length 文字に切り詰める

        remaining_length は切り詰めで落とした文字数（切り詰めなしなら0）
        """
        sliced = text[self.start_index :]
        truncated = sliced[: self.max_length]
        return PaginatedContent(
            content=truncated,
            remaining_length=len(sliced) - len(truncated),
        )


class CaptionTrackKind(Enum):
    """字幕トラックの種類"""

    STANDARD = "standard"  # 手動字幕
    AUTO_GENERATED = "auto_generated"  # 自動生成字幕（asr）


@dataclass(frozen=True)
class CaptionTrack:
    """言語・種類ごとの字幕トラック"""

    language_code: str
    base_url: str
    kind: CaptionTrackKind
    name: str = ""

    @property
    def is_auto_generated(self) -> bool:
        return self.kind is CaptionTrackKind.AUTO_GENERATED


@dataclass
class CaptionMetadata:
    """動画のタイトルと利用可能な字幕トラック一覧"""

    video_id: str
    title: str
    tracks: list[CaptionTrack]


@dataclass(frozen=True)
class TranscriptLine:
    """字幕の1行"""

    text: str
    offset_ms: float
    duration_ms: float

    def __post_init__(self) -> None:
        if self.offset_ms < 0:
            raise ValueError("offset_ms must be non-negative")
        if self.duration_ms < 0:
            raise ValueError("duration_ms must be non-negative")

    @property
    def end_ms(self) -> float:
        return self.offset_ms + self.duration_ms


@dataclass
class Transcript:
    """動画の字幕全体"""

    video_id: str
    title: str
    lines: list[TranscriptLine]
    language_code: str = ""
    is_auto_generated: bool = False


@dataclass(frozen=True)
class TextBlock:
    """テキストのコンテンツブロック"""

    text: str


@dataclass(frozen=True)
class ImageBlock:
    """画像のコンテンツブロック（dataはbase64文字列）"""

    data: str
    mime_type: str


@dataclass
class ToolResponse:
    """ツール呼び出し1回分の応答"""

    content: list[TextBlock | ImageBlock]
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        return cls(content=[TextBlock(text=text)])

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        return cls(content=[TextBlock(text=message)], is_error=True)

    @property
    def joined_text(self) -> str:
        """テキストブロックを改行で連結"""
        return "\n".join(
            block.text for block in self.content if isinstance(block, TextBlock)
        )
