"""時間変換ユーティリティ"""


def to_video_timestamp(offset_ms: float, duration_ms: float = 0) -> str:
    """
    ミリ秒のオフセットを動画の表示用タイムスタンプに変換

    1秒未満は切り捨て。0時間の場合は時の部分を省略する。
    duration_ms は将来の終了時刻表示用で、現状の書式には影響しない。

    Args:
        offset_ms: 開始オフセット（ミリ秒）
        duration_ms: 継続時間（ミリ秒）

    Returns:
        "H:MM:SS" または "M:SS"

    Example:
        to_video_timestamp(61000)    # "1:01"
        to_video_timestamp(3661000)  # "1:01:01"
    """
    total_seconds = max(0, int(offset_ms // 1000))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
