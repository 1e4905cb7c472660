"""beautifulsoup4 + markdownify による HTML → Markdown 変換"""

import re

from bs4 import BeautifulSoup
from markdownify import markdownify as md

from src.infrastructure.logging_config import get_logger

logger = get_logger(__name__)

# 本文と無関係な要素
_NOISE_TAGS = ["script", "style", "noscript", "template", "iframe", "svg", "nav", "footer", "aside"]


class MarkdownifyConverter:
    """HtmlConverter 実装"""

    def convert(self, html: str) -> str:
        """
        HTMLを読みやすいMarkdownに変換

        変換に失敗した場合はプレーンテキスト抽出に劣化させる
        """
        soup = BeautifulSoup(html, "html.parser")
        self._clean_html(soup)

        # <main> / <article> があれば本文として優先
        root = soup.find("main") or soup.find("article") or soup.body or soup

        try:
            markdown = md(
                str(root),
                heading_style="ATX",  # Use # for headings
                bullets="-",
            )
        except Exception as e:
            logger.warning(f"[HTML] Markdown変換失敗、テキスト抽出に切り替え: {e}")
            markdown = root.get_text("\n")

        # 連続する空行を整理
        markdown = re.sub(r"[ \t]+\n", "\n", markdown)
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)
        return markdown.strip()

    def _clean_html(self, soup: BeautifulSoup) -> None:
        """不要な要素を削除"""
        for tag in soup(_NOISE_TAGS):
            tag.decompose()
