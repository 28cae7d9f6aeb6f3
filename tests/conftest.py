import pytest

from fred_rss.models import FeedDocument, FeedItem, FeedSource


@pytest.fixture
def sources():
    return [
        FeedSource("Example", "http://x/feed"),
        FeedSource("Other", "http://y/feed"),
    ]


@pytest.fixture
def make_document():
    def factory(count, title="Example feed"):
        items = tuple(
            FeedItem(title=f"Item {i}", description=f"Body {i}", link=f"http://x/{i}")
            for i in range(count)
        )
        return FeedDocument(title=title, items=items)

    return factory
