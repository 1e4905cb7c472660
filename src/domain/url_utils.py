"""URL正規化と動画ID抽出"""

import re

_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

# watch / youtu.be / embed / v / e / shorts / live 形式
_VIDEO_ID_PATTERN = re.compile(
    r"(?:"
    r"(?:www\.|m\.|music\.)?youtube(?:-nocookie)?\.com/"
    r"(?:watch\?(?:[^#]*&)?v=|embed/|v/|e/|shorts/|live/)"
    r"|youtu\.be/"
    r")"
    r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])",
    re.IGNORECASE,
)


def normalize_url(url: str) -> str:
    """
    スキーム（http:// / https://）がなければ https:// を付与

    大文字のスキーム（HTTPS://）は小文字にそろえる
    """
    match = _SCHEME_PATTERN.match(url)
    if match:
        return match.group(0).lower() + url[match.end():]
    return f"https://{url}"


def extract_video_id(url: str) -> str | None:
    """既知のURL形式から動画IDを抽出（該当なしはNone）"""
    match = _VIDEO_ID_PATTERN.search(url)
    return match.group(1) if match else None


def resolve_video_id(url_or_id: str) -> str:
    """
    URLまたは動画IDから動画IDを決定

    URL形式に一致しない場合は入力をそのままIDとして扱う（検証はしない）
    """
    return extract_video_id(url_or_id) or url_or_id


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"
