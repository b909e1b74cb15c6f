import xml.etree.ElementTree as ET

from bdrss import cli
from bdrss.core import builder
from bdrss.exceptions import FetchError, WriteError


def test_main_writes_fallback_feed_when_proxy_fails(tmp_path, monkeypatch):
    output = tmp_path / "feeds" / "feed.xml"
    monkeypatch.setenv("BDRSS_OUTPUT_PATH", str(output))
    monkeypatch.delenv("BDRSS_CONFIG_PATH", raising=False)

    def fake_fetch(self, url):
        raise FetchError("Connection refused")

    monkeypatch.setattr(builder.FlareSolverrFetcher, "fetch", fake_fetch)

    assert cli.main() == 0
    items = ET.parse(output).getroot().find("channel").findall("item")
    assert [i.findtext("title") for i in items] == ["Feed generation failed"]


def test_main_exits_nonzero_on_write_error(monkeypatch):
    def broken(settings):
        raise WriteError("Cannot write feed to feeds/feed.xml")

    monkeypatch.setattr(cli, "generate_feed", broken)
    assert cli.main() == 1
