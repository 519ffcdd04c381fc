#!/usr/bin/env python3
"""
Periodical Archive Scraper
Crawls one journal (or all of them) and saves editions/articles to JSON
"""

import sys
from datetime import datetime

from src.journal_config import JOURNALS, JournalConfig, get_journal
from src.periodical_crawler import PeriodicalCrawler, summarize
from src.settings import ScraperSettings


def scrape(journal: JournalConfig, settings: ScraperSettings) -> str:
    """Run the full pipeline for one journal and return the output path"""
    crawler = PeriodicalCrawler(journal, settings=settings)
    try:
        editions = crawler.crawl()
        output_file = crawler.save_json(editions)
    finally:
        crawler.close()

    counts = summarize(editions)
    print(f"{journal.key}: {counts['editions']} editions, {counts['articles']} articles "
          f"({counts['errors']} with errors) -> {output_file}")
    return output_file


def main():
    """Main function to scrape journals"""
    if len(sys.argv) != 2:
        print(f"Usage: python scrape_journal.py [{'|'.join(sorted(JOURNALS))}|all]")
        sys.exit(1)

    target = sys.argv[1]
    journal_keys = sorted(JOURNALS) if target == 'all' else [target]

    try:
        journals = [get_journal(key) for key in journal_keys]
    except KeyError as e:
        print(f"ERROR: {e.args[0]}")
        sys.exit(1)

    try:
        settings = ScraperSettings.from_env()
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"Starting scrape at {datetime.now()}")

    failed = []
    for journal in journals:
        try:
            scrape(journal, settings)
        except Exception as e:
            print(f"ERROR: scraping {journal.key} failed: {e}")
            failed.append(journal.key)

    if failed:
        print(f"Failed journals: {', '.join(failed)}")
        sys.exit(1)

    print("Scrape completed.")


if __name__ == "__main__":
    main()
