import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from src.extractors import (
    clean_title,
    collapse_whitespace,
    extract_abstract,
    extract_doi,
    extract_keyword_nodes,
    extract_keywords_regex,
    find_abstract_link,
    parse_issue_info,
    reorder_author_name,
    split_authors,
    strip_date_prefix,
)
from src.journal_config import KEYWORDS_NODES, JournalConfig
from src.json_store import write_editions
from src.models import Article, Edition
from src.page_fetcher import PageFetcher
from src.settings import ScraperSettings


class PeriodicalCrawler:
    def __init__(self, journal: JournalConfig, settings: Optional[ScraperSettings] = None,
                 fetcher: Optional[PageFetcher] = None):
        self.journal = journal
        self.selectors = journal.selectors
        self.settings = settings or ScraperSettings.from_env()
        self.logger = self._setup_logger()
        self.fetcher = fetcher or PageFetcher(
            retry_policy=self.settings.retry,
            timeout=self.settings.timeout,
            verify_tls=journal.verify_tls,
            pool_size=self.settings.max_workers,
            user_agent=self.settings.user_agent,
        )

    def _setup_logger(self):
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        return logging.getLogger(__name__)

    def _get_soup(self, url: str) -> BeautifulSoup:
        return BeautifulSoup(self.fetcher.fetch(url), 'html.parser')

    def crawl(self) -> List[Edition]:
        """List editions, list their articles and enrich every article"""
        self.logger.info(f"Crawling {self.journal.name} ({len(self.journal.archive_urls)} archive pages)")

        editions = self.list_editions()
        editions = self.list_articles(editions)
        editions = self.enrich_editions(editions)

        counts = summarize(editions)
        self.logger.info(
            f"Finished {self.journal.name}: {counts['editions']} editions, "
            f"{counts['articles']} articles, {counts['errors']} failed"
        )
        return editions

    def list_editions(self) -> List[Edition]:
        """Collect (title, url) for every issue on the archive pages; a failing archive page aborts the run"""
        editions = []

        for archive_url in self.journal.archive_urls:
            soup = self._get_soup(archive_url)
            page_editions = []

            for node in soup.select(self.selectors.issue_summary):
                link_node = node.select_one(self.selectors.issue_link) if self.selectors.issue_link else node
                link = (link_node.get('href') or '').strip() if link_node is not None else ''
                if not link:
                    continue

                title = ''
                if self.selectors.issue_title:
                    title_node = node.select_one(self.selectors.issue_title)
                    title = title_node.get_text().strip() if title_node is not None else ''

                if self.selectors.issue_series:
                    series_node = node.select_one(self.selectors.issue_series)
                    series = series_node.get_text().strip() if series_node is not None else ''
                    if series:
                        title = f"{series} - {title}"

                page_editions.append(Edition(title=title, url=urljoin(archive_url, link)))

            self.logger.info(f"Found {len(page_editions)} editions on {archive_url}")
            editions.extend(page_editions)

        return editions

    def list_articles(self, editions: List[Edition]) -> List[Edition]:
        """Visit every edition page, filling in its date and articles"""
        result = []

        for edition in editions:
            try:
                result.append(self._list_edition_articles(edition))
            except Exception as e:
                self.logger.warning(f"Skipping edition {edition.title or edition.url}: {e}")
                continue

        return result

    def _list_edition_articles(self, edition: Edition) -> Edition:
        soup = self._get_soup(edition.url)
        title = edition.title
        date = ''

        if self.selectors.published_date:
            date_node = soup.select_one(self.selectors.published_date)
            if date_node is not None:
                date = strip_date_prefix(date_node.get_text(), self.journal.date_prefix)

        if self.selectors.issue_info:
            info_node = soup.select_one(self.selectors.issue_info)
            volume, number, published = parse_issue_info(info_node.get_text() if info_node is not None else '')
            title = f"Volume {volume}, Número {number}"
            date = published

        articles = [
            self._parse_article_summary(node, edition.url)
            for node in soup.select(self.selectors.article_summary)
        ]

        self.logger.info(f"Edition {title}: {len(articles)} articles")
        return replace(edition, title=title, date=date, articles=articles)

    def _parse_article_summary(self, node, page_url: str) -> Article:
        title_node = node.select_one(self.selectors.article_title)
        title = clean_title(title_node.get_text()) if title_node is not None else ''

        if self.selectors.abstract_link_label:
            link = find_abstract_link(node, self.selectors.abstract_link_label,
                                      self.selectors.abstract_link_text or '')
        else:
            link = title_node.get('href') if title_node is not None else None
        link = (link or '').strip()
        url = urljoin(page_url, link) if link else ''

        if self.selectors.article_authors:
            authors_node = node.select_one(self.selectors.article_authors)
            authors = split_authors(authors_node.get_text() if authors_node is not None else '')
        else:
            authors = [
                reorder_author_name(author.get_text())
                for author in node.select(self.selectors.article_author_items)
                if collapse_whitespace(author.get_text())
            ]

        return Article(title=title, url=url, authors=authors)

    def enrich_article(self, article: Article) -> Article:
        """Add doi, keywords and abstract from the detail page; failures are recorded on the article"""
        try:
            if not article.url:
                raise ValueError("Article has no detail URL")

            soup = self._get_soup(article.url)

            doi = extract_doi(soup, self.selectors.doi)
            if self.journal.keyword_mode == KEYWORDS_NODES:
                keywords = extract_keyword_nodes(soup, self.selectors.keyword_items,
                                                 self.journal.split_keyword_sentences)
            else:
                keywords = extract_keywords_regex(soup.get_text(), self.journal.keywords_regex)
            abstract = extract_abstract(soup, self.selectors.abstract, self.selectors.abstract_label,
                                        self.journal.abstract_prefix)

            return replace(article, doi=doi, keywords=keywords, abstract=abstract, error=None)

        except Exception as e:
            self.logger.error(f"Error fetching article {article.title}: {e}")
            return replace(article, doi='', keywords=[], abstract='', error=str(e) or type(e).__name__)

    def enrich_editions(self, editions: List[Edition]) -> List[Edition]:
        """Enrich all articles on a bounded worker pool, keeping edition and article order"""
        articles = [article for edition in editions for article in edition.articles]
        self.logger.info(f"Enriching {len(articles)} articles with {self.settings.max_workers} workers")

        if self.settings.max_workers == 1:
            enriched = [self.enrich_article(article) for article in articles]
        else:
            with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
                enriched = list(executor.map(self.enrich_article, articles))

        result = []
        position = 0
        for edition in editions:
            count = len(edition.articles)
            result.append(replace(edition, articles=enriched[position:position + count]))
            position += count
        return result

    def save_json(self, editions: List[Edition], output_file: Optional[str] = None) -> str:
        """Write the editions to the journal's JSON file and return its path"""
        output_file = output_file or os.path.join(self.settings.output_dir, self.journal.file_name)
        write_editions(editions, output_file)
        self.logger.info(f"Saved {len(editions)} editions to {output_file}")
        return output_file

    def close(self) -> None:
        self.fetcher.close()


def summarize(editions: List[Edition]) -> Dict[str, int]:
    return {
        'editions': len(editions),
        'articles': sum(len(edition.articles) for edition in editions),
        'errors': sum(1 for edition in editions for article in edition.articles if article.error),
    }
