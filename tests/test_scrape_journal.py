from unittest.mock import MagicMock, patch

import pytest

import scrape_journal
from src.models import Article, Edition


def _run(*args):
    with patch.object(scrape_journal.sys, "argv", ["scrape_journal.py", *args]):
        scrape_journal.main()


def test_unknown_journal_exits_before_crawling(capsys) -> None:
    with patch("scrape_journal.PeriodicalCrawler") as crawler_cls:
        with pytest.raises(SystemExit) as exc_info:
            _run("revista_inexistente")

    assert exc_info.value.code == 1
    crawler_cls.assert_not_called()
    assert "Unknown journal 'revista_inexistente'" in capsys.readouterr().out


def test_error_inside_a_crawl_does_not_stop_other_journals(tmp_path, capsys) -> None:
    good = MagicMock()
    good.crawl.return_value = [Edition(title="v. 1", url="u", articles=[Article(title="T", url="a")])]
    good.save_json.return_value = str(tmp_path / "out.json")
    bad = MagicMock()
    bad.crawl.side_effect = KeyError("href")

    def build(journal, settings):
        return bad if journal.key == "arqueologia_publica" else good

    with patch.dict("os.environ", {}, clear=True), \
         patch("scrape_journal.PeriodicalCrawler", side_effect=build):
        with pytest.raises(SystemExit) as exc_info:
            _run("all")

    out = capsys.readouterr().out
    assert exc_info.value.code == 1
    assert "ERROR: scraping arqueologia_publica failed" in out
    assert "Failed journals: arqueologia_publica" in out
    assert good.crawl.call_count == 3
    bad.close.assert_called_once()


def test_single_journal_success(tmp_path, capsys) -> None:
    crawler = MagicMock()
    crawler.crawl.return_value = []
    crawler.save_json.return_value = str(tmp_path / "revista_habitus.json")

    with patch.dict("os.environ", {}, clear=True), \
         patch("scrape_journal.PeriodicalCrawler", return_value=crawler):
        _run("revista_habitus")

    out = capsys.readouterr().out
    assert "revista_habitus: 0 editions, 0 articles (0 with errors)" in out
    assert "Scrape completed." in out
