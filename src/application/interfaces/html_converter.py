"""HTML変換インターフェース"""

from typing import Protocol


class HtmlConverter(Protocol):
    """HTMLを読みやすいテキストに変換するインターフェース"""

    def convert(self, html: str) -> str:
        """
        HTMLをMarkdownに変換（失敗しない、劣化は許容）

        Args:
            html: HTML文字列

        Returns:
            Markdownテキスト
        """
        ...
