import glob
import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from src.json_store import load_editions
from src.models import Article, Edition

JOURNAL_FIELDS = [
    'name', 'institutional_affiliation', 'issn', 'thematic_scope', 'website_url',
    'periodicity', 'current_status', 'foundation_year', 'closure_year', 'qualis',
]


def escape(value: Optional[str]) -> str:
    """Escape a string for a double-quoted Ruby literal"""
    if not value:
        return ''
    return value.replace('\\', '\\\\').replace('"', '\\"').replace('#', '\\#')


def to_ruby_value(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return '[' + ', '.join(to_ruby_value(item) for item in value) + ']'
    if isinstance(value, dict):
        return to_ruby_hash(value)
    return f'"{escape(str(value))}"'


def to_ruby_hash(data: Dict[str, Any]) -> str:
    entries = [f"{key}: {to_ruby_value(value)}" for key, value in data.items()]
    return '{ ' + ', '.join(entries) + ' }'


def ruby_identifier(text: str) -> str:
    identifier = re.sub(r'[^a-z0-9]+', '_', (text or '').lower()).strip('_')
    if identifier and identifier[0].isdigit():
        identifier = f"j_{identifier}"
    return identifier


class SeedGenerator:
    def __init__(self, journals_file: str, input_dir: str, output_dir: str):
        self.input_dir = input_dir
        self.output_dir = output_dir
        self.logger = self._setup_logger()
        self.journals_df = self._load_journals(journals_file)

    def _setup_logger(self):
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        return logging.getLogger(__name__)

    def _load_journals(self, journals_file: str) -> pd.DataFrame:
        try:
            return pd.read_csv(journals_file)
        except (FileNotFoundError, pd.errors.EmptyDataError):
            self.logger.warning(f"No journal metadata found at {journals_file}")
            return pd.DataFrame(columns=['slug'] + JOURNAL_FIELDS)

    def generate_all(self) -> List[str]:
        """Generate one seed script per JSON file in the input directory"""
        input_files = sorted(glob.glob(os.path.join(self.input_dir, '*.json')))
        self.logger.info(f"Generating seeds for {len(input_files)} files from {self.input_dir}")

        generated = []
        for input_file in input_files:
            try:
                generated.append(self.generate_file(input_file))
            except Exception as e:
                self.logger.error(f"Error generating seeds for {input_file}: {e}")
                continue

        return generated

    def generate_file(self, input_file: str) -> str:
        slug = os.path.splitext(os.path.basename(input_file))[0]
        editions = load_editions(input_file)
        seed = self.build_seed(slug, editions)

        os.makedirs(self.output_dir, exist_ok=True)
        output_file = os.path.join(self.output_dir, f"{slug}_seeds.rb")
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(seed)

        self.logger.info(f"Seed file generated at {output_file}")
        return output_file

    def journal_metadata(self, slug: str) -> Dict[str, Any]:
        """Look up the journal row for a slug; unknown journals get a name-only record"""
        if 'slug' in self.journals_df.columns:
            rows = self.journals_df[self.journals_df['slug'] == slug]
        else:
            rows = self.journals_df.iloc[0:0]

        if rows.empty:
            self.logger.warning(f"No metadata for journal '{slug}', seeding it by name only")
            return {'name': slug}

        row = rows.iloc[0]
        metadata = {}
        for field in JOURNAL_FIELDS:
            value = row.get(field)
            if value is None or pd.isna(value):
                metadata[field] = None
            elif isinstance(value, float) and value.is_integer():
                metadata[field] = int(value)
            elif hasattr(value, 'item'):
                metadata[field] = value.item()
            else:
                metadata[field] = value
        return metadata

    def build_seed(self, slug: str, editions: List[Edition]) -> str:
        journal = self.journal_metadata(slug)
        journal_var = ruby_identifier(slug) or 'journal'
        key_field = 'issn' if journal.get('issn') else 'name'

        seed = "scientific_journals = [\n"
        seed += f"  {to_ruby_hash(journal)}\n"
        seed += "]\n\n"
        seed += "scientific_journals.each do |attrs|\n"
        seed += f"  ScientificJournal.find_or_create_by!({key_field}: attrs[:{key_field}]) do |journal|\n"
        seed += "    journal.assign_attributes(attrs)\n"
        seed += "  end\n"
        seed += "end\n\n"
        seed += f"{journal_var} = ScientificJournal.find_by!({key_field}: {to_ruby_value(journal[key_field])})\n\n"

        grouped = self.group_editions(editions)

        edition_rows = [
            {
                'edition_type': None,
                'publication_date': edition.date,
                'url': edition.url,
                'volume': edition.title,
            }
            for edition, _ in grouped
        ]
        seed += f"{journal_var}_editions = [\n"
        seed += ',\n'.join(f"  {to_ruby_hash(row)}" for row in edition_rows)
        seed += "\n]\n\n"
        seed += f"{journal_var}_editions.each do |attrs|\n"
        seed += (f"  Edition.find_or_create_by!(scientific_journal: {journal_var}, volume: attrs[:volume], "
                 f"edition_type: attrs[:edition_type]) do |edition|\n")
        seed += "    edition.publication_date = attrs[:publication_date]\n"
        seed += "    edition.url = attrs[:url]\n"
        seed += "    edition.editors = nil\n"
        seed += "    edition.theme = nil\n"
        seed += "    edition.doi = nil\n"
        seed += "    edition.available_format = nil\n"
        seed += "  end\n"
        seed += "end\n\n"

        used_names = set()
        for index, (edition, articles) in enumerate(grouped, start=1):
            if not articles:
                continue

            var_name = f"{journal_var}_{ruby_identifier(edition.title) or f'edition_{index}'}"
            if var_name in used_names:
                var_name = f"{var_name}_{index}"
            used_names.add(var_name)

            article_rows = [self._article_row(article) for article in articles]
            seed += (f"{var_name}_edition = Edition.find_by!(scientific_journal: {journal_var}, "
                     f"volume: {to_ruby_value(edition.title)})\n")
            seed += f"{var_name}_articles = [\n"
            seed += ',\n'.join(f"  {to_ruby_hash(row)}" for row in article_rows)
            seed += "\n]\n"
            seed += f"{var_name}_articles.each do |attrs|\n"
            seed += "  author_records = attrs[:authors].map { |author_name| Author.find_or_create_by!(name: author_name) }\n"
            seed += "  keyword_records = (attrs[:keywords] || []).map { |kw| Keyword.find_or_create_by!(name: kw) }\n"
            seed += f"  Article.find_or_create_by!(title: attrs[:title], edition: {var_name}_edition) do |article|\n"
            seed += "    article.authors = author_records\n"
            seed += "    article.article_url = attrs[:article_url]\n"
            seed += "    article.doi = attrs[:doi]\n"
            seed += "    article.abstract = attrs[:abstract]\n"
            seed += "    article.keywords = keyword_records\n"
            seed += "  end\n"
            seed += "end\n\n"

        return seed

    def group_editions(self, editions: List[Edition]) -> List[Tuple[Edition, List[Article]]]:
        """
        Merge editions sharing a title and keep one article per title.

        Articles without authors are dropped because the target schema requires
        at least one author per article.
        """
        groups: Dict[str, Tuple[Edition, List[Article], set]] = {}
        order = []

        for edition in editions:
            if edition.title not in groups:
                groups[edition.title] = (edition, [], set())
                order.append(edition.title)
            _, articles, seen_titles = groups[edition.title]

            for article in edition.articles:
                if not article.authors:
                    continue
                if article.title in seen_titles:
                    self.logger.warning(f"Duplicate article '{article.title}' in edition '{edition.title}' skipped")
                    continue
                seen_titles.add(article.title)
                articles.append(article)

        return [(groups[title][0], groups[title][1]) for title in order]

    def _article_row(self, article: Article) -> Dict[str, Any]:
        return {
            'title': article.title,
            'authors': list(article.authors),
            'article_url': article.url,
            'doi': article.doi or None,
            'keywords': list(article.keywords),
            'abstract': article.abstract or None,
        }
