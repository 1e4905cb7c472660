"""字幕トラック（timed text）のパーサ

YouTube の字幕 URL が返す json3 / srv1 / srv3 / ttml / vtt 形式を
TranscriptLine のリストに変換する。行の順序は元データのまま。
"""

import html
import json
import re

from src.domain.entities import TranscriptLine


_ATTR_PATTERN = re.compile(r'([\w:-]+)\s*=\s*"([^"]*)"')
_BR_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)
# 書式タグのみ（<i> / </c> / <s t="500"> / <c.colorE5E5E5> / <00:00:01.000>）
# "x < 3 and y > 2" のような本文中の不等号には一致しない
_TAG_PATTERN = re.compile(
    r"</?[A-Za-z][\w:-]*(?:\.[\w-]+)*"
    r"""(?:\s+[\w:-]+\s*=\s*(?:"[^"]*"|'[^']*'))*\s*/?>"""
    r"|<\d{2}:[\d:.]+>"
)
# <text start="0.0" dur="1.5">テキスト</text>
_SRV1_PATTERN = re.compile(r"<text\b([^>]*)>(.*?)</text>", re.DOTALL)
# <p t="1000" d="1500">テキスト</p> または <p begin="00:00:00.000" end="00:00:01.500">
_P_PATTERN = re.compile(r"<p\b([^>]*)>(.*?)</p>", re.DOTALL)
# 00:00:00.000 --> 00:00:01.500（時は省略可）
_VTT_CUE_PATTERN = re.compile(
    r"((?:\d+:)?\d{2}:\d{2}[.,]\d{3})\s*-->\s*((?:\d+:)?\d{2}:\d{2}[.,]\d{3})"
)


def parse_timed_text(data: str) -> list[TranscriptLine]:
    """
    形式を判定してパース

    Args:
        data: 字幕URLのレスポンス本文

    Returns:
        TranscriptLineのリスト（判定できない形式は空リスト）
    """
    stripped = data.lstrip("\ufeff \t\r\n")

    if stripped.startswith("{"):
        return parse_json3(stripped)
    if stripped.startswith("WEBVTT"):
        return parse_vtt(stripped)
    if "<text" in stripped:
        return parse_srv1(stripped)
    if "<p" in stripped:
        return parse_srv3(stripped)

    return []


def clean_caption_text(raw: str, markup: bool = True) -> str:
    """
    タグ除去・エンティティ復号・空白の正規化

    srv1 は "&amp;#39;" のように二重エスケープされていることがある。
    タグ除去はエスケープされたままの本文に対して先に行い、復号で現れた
    "<" / ">" は書式タグの形をしている場合だけ除去する。

    Args:
        raw: 字幕本文
        markup: False ならタグ除去・復号をしない（json3 の utf8 はプレーンテキスト）
    """
    if not markup:
        return " ".join(raw.split())

    text = _strip_tags(raw)
    decoded = html.unescape(text)
    if decoded != text:
        # srv1 では書式タグ自体がエスケープされている（&lt;i&gt;）
        text = html.unescape(_strip_tags(decoded))
    return " ".join(text.split())


def _strip_tags(text: str) -> str:
    text = _BR_PATTERN.sub(" ", text)
    return _TAG_PATTERN.sub("", text)


def parse_json3(data: str) -> list[TranscriptLine]:
    """
    json3 形式をパース

    Raises:
        ValueError: JSONとして不正、または events の構造が想定外
    """
    parsed = json.loads(data)
    if not isinstance(parsed, dict):
        raise ValueError("json3 root is not an object")
    events = parsed.get("events") or []
    if not isinstance(events, list):
        raise ValueError("json3 events is not a list")

    lines = []

    for event in events:
        # tStartMs: 開始時間（ミリ秒）
        # dDurationMs: 継続時間（ミリ秒）
        # segs: セグメント（テキスト）
        if not isinstance(event, dict):
            continue
        segs = event.get("segs")
        if not isinstance(segs, list):
            continue

        # utf8 はエスケープされていないプレーンテキスト
        text = clean_caption_text(
            "".join(
                str(seg.get("utf8", "")) for seg in segs if isinstance(seg, dict)
            ),
            markup=False,
        )
        if not text:
            continue

        lines.append(
            TranscriptLine(
                text=text,
                offset_ms=max(0.0, _to_ms(event.get("tStartMs"))),
                duration_ms=max(0.0, _to_ms(event.get("dDurationMs"))),
            )
        )

    return lines


def _to_ms(value: object) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid json3 time value: {value!r}") from e


def parse_srv1(data: str) -> list[TranscriptLine]:
    """srv1 形式（<text start dur>、秒単位）をパース"""
    lines = []

    for attrs_text, body in _SRV1_PATTERN.findall(data):
        attrs = dict(_ATTR_PATTERN.findall(attrs_text))
        try:
            start = float(attrs.get("start", "0"))
            dur = float(attrs.get("dur", "0"))
        except ValueError:
            continue

        text = clean_caption_text(body)
        if text:
            lines.append(
                TranscriptLine(
                    text=text,
                    offset_ms=max(0.0, start * 1000),
                    duration_ms=max(0.0, dur * 1000),
                )
            )

    return lines


def parse_srv3(data: str) -> list[TranscriptLine]:
    """srv3（<p t d>、ミリ秒）/ ttml（<p begin end>）形式をパース"""
    lines = []

    for attrs_text, body in _P_PATTERN.findall(data):
        attrs = dict(_ATTR_PATTERN.findall(attrs_text))
        try:
            if "t" in attrs:
                start_ms = float(attrs["t"])
                duration_ms = float(attrs.get("d", "0"))
            elif "begin" in attrs:
                start_ms = parse_timestamp(attrs["begin"]) * 1000
                end_ms = parse_timestamp(attrs.get("end", attrs["begin"])) * 1000
                duration_ms = end_ms - start_ms
            else:
                continue
        except ValueError:
            continue

        text = clean_caption_text(body)
        if text:
            lines.append(
                TranscriptLine(
                    text=text,
                    offset_ms=max(0.0, start_ms),
                    duration_ms=max(0.0, duration_ms),
                )
            )

    return lines


def parse_vtt(data: str) -> list[TranscriptLine]:
    """VTT 形式をパース"""
    lines = []

    rows = data.splitlines()
    i = 0
    while i < len(rows):
        match = _VTT_CUE_PATTERN.search(rows[i])
        if not match:
            i += 1
            continue

        start = parse_timestamp(match.group(1))
        end = parse_timestamp(match.group(2))
        i += 1
        text_rows = []
        while i < len(rows) and rows[i].strip():
            text_rows.append(rows[i].strip())
            i += 1

        text = clean_caption_text(" ".join(text_rows))
        if text:
            lines.append(
                TranscriptLine(
                    text=text,
                    offset_ms=start * 1000,
                    duration_ms=max(0.0, (end - start) * 1000),
                )
            )

    return lines


def parse_timestamp(ts: str) -> float:
    """タイムスタンプを秒に変換（00:00:00.000 / 00:00.000 / 1.5s 形式）"""
    ts = ts.strip().replace(",", ".")
    if ts.endswith("s") and ":" not in ts:
        ts = ts[:-1]
    parts = ts.split(":")
    if len(parts) == 3:
        h, m, s = parts
        return float(h) * 3600 + float(m) * 60 + float(s)
    elif len(parts) == 2:
        m, s = parts
        return float(m) * 60 + float(s)
    else:
        return float(ts)
