"""テスト共通のフィクスチャ"""

import pytest

from tests.fakes import FakeHtmlConverter, FakeHttpFetcher


@pytest.fixture
def fake_fetcher() -> FakeHttpFetcher:
    return FakeHttpFetcher()


@pytest.fixture
def fake_converter() -> FakeHtmlConverter:
    return FakeHtmlConverter()
