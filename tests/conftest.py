import pytest

from bdrss.config import FeedSettings

BASE_URL = "https://bdnews24.com"

SAMPLE_PAGE = """
<html><body>
<section class="Cat-lead">
  <div class="Cat-lead-wrapper">
    <a href="/x"><img src="/img.jpg"><h1> A </h1><p>Lead summary</p></a>
  </div>
  <div class="Cat-list"><a href="/y"><h5>B</h5></a></div>
  <div class="Cat-list"><a href="/z"><h5>C</h5></a></div>
</section>
</body></html>
"""


class StubFetcher:
    """Returns canned markup, or raises, instead of calling the proxy."""
    def __init__(self, html=None, error=None):
        self.html = html
        self.error = error
        self.urls = []

    def fetch(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.html


@pytest.fixture()
def settings(tmp_path):
    return FeedSettings(
        base_url=BASE_URL,
        target_url=BASE_URL + "/opinion",
        proxy_url="http://proxy.test:8191",
        output_path=tmp_path / "feeds" / "feed.xml",
        feed_title="bdnews24.com – Opinion",
        feed_description="Latest opinion pieces",
        feed_url=BASE_URL + "/opinion",
    )


@pytest.fixture()
def sample_page():
    return SAMPLE_PAGE


@pytest.fixture()
def stub_fetcher():
    return StubFetcher
