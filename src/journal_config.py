"""
Per-journal selector configuration.

Every publisher differs only in where things live in its markup, so a journal is
described by data (archive URLs + CSS selectors) and crawled by the same
PeriodicalCrawler.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

KEYWORDS_NODES = 'nodes'
KEYWORDS_REGEX = 'regex'

DEFAULT_KEYWORDS_REGEX = r'Palavras-chave:\s*([^\n]+)'


@dataclass(frozen=True)
class JournalSelectors:
    # Archive listing
    issue_summary: str
    article_summary: str
    article_title: str
    issue_link: Optional[str] = None
    issue_title: Optional[str] = None
    issue_series: Optional[str] = None

    # Edition page
    published_date: Optional[str] = None
    issue_info: Optional[str] = None
    article_authors: Optional[str] = None
    article_author_items: Optional[str] = None
    abstract_link_label: Optional[str] = None
    abstract_link_text: Optional[str] = None

    # Article detail page
    doi: Optional[str] = None
    keyword_items: Optional[str] = None
    abstract: Optional[str] = None
    abstract_label: Optional[str] = None


@dataclass(frozen=True)
class JournalConfig:
    key: str
    name: str
    file_name: str
    archive_urls: Tuple[str, ...]
    selectors: JournalSelectors
    keyword_mode: str = KEYWORDS_REGEX
    keywords_regex: str = DEFAULT_KEYWORDS_REGEX
    split_keyword_sentences: bool = False
    date_prefix: Optional[str] = None
    abstract_prefix: Optional[str] = None
    verify_tls: bool = True

    def __post_init__(self):
        if self.keyword_mode not in (KEYWORDS_NODES, KEYWORDS_REGEX):
            raise ValueError(f"Unknown keyword mode for {self.key}: {self.keyword_mode}")
        if self.keyword_mode == KEYWORDS_NODES and not self.selectors.keyword_items:
            raise ValueError(f"Journal {self.key} uses keyword nodes but has no keyword_items selector")
        if not self.selectors.article_authors and not self.selectors.article_author_items:
            raise ValueError(f"Journal {self.key} needs article_authors or article_author_items")


# OJS 3 default theme, shared by most university portals
_OJS_DEFAULT_SELECTORS = dict(
    issue_summary='.obj_issue_summary',
    issue_link='a.title',
    issue_title='a.title',
    published_date='.heading .published .value',
    article_summary='.obj_article_summary',
    article_title='.title a',
    article_authors='.meta .authors',
    doi='.item.doi .value a',
    abstract='.item.abstract',
)

_UNICAMP_ARCHIVE = 'https://periodicos.sbu.unicamp.br/ojs/index.php/rap/issue/archive'
_LEPAARQ_BASE = 'https://periodicos.ufpel.edu.br/index.php/lepaarq'
_HABITUS_ARCHIVE = 'https://seer.pucgoias.edu.br/index.php/habitus/issue/archive'


JOURNALS: Dict[str, JournalConfig] = {
    'arqueologia_publica': JournalConfig(
        key='arqueologia_publica',
        name='Revista de Arqueologia Pública',
        file_name='arqueologia_publica.json',
        archive_urls=(f'{_UNICAMP_ARCHIVE}/1', f'{_UNICAMP_ARCHIVE}/2'),
        selectors=JournalSelectors(
            issue_summary='.card.issue-summary',
            issue_link='a',
            issue_title='.card-title > a',
            published_date='.page-issue-date',
            article_summary='.article-summary',
            article_title='.article-summary-title > a',
            article_authors='.article-summary-authors',
            doi='.csl-entry a',
            keyword_items='.article-details-keywords-value span',
            abstract='.article-details-abstract',
        ),
        keyword_mode=KEYWORDS_NODES,
        split_keyword_sentences=True,
        date_prefix=r'publicado em',
        verify_tls=False,
    ),
    'cadernos_lepaarq': JournalConfig(
        key='cadernos_lepaarq',
        name='Cadernos do LEPAARQ',
        file_name='cadernos_lepaarq.json',
        archive_urls=(f'{_LEPAARQ_BASE}/issue/archive', f'{_LEPAARQ_BASE}/issue/archive/2'),
        selectors=JournalSelectors(**_OJS_DEFAULT_SELECTORS),
    ),
    'revista_goeldi': JournalConfig(
        key='revista_goeldi',
        name='Boletim do Museu Paraense Emílio Goeldi. Série Ciências Humanas',
        file_name='revista_goeldi.json',
        archive_urls=('https://www.scielo.br/j/bgoeldi/grid',),
        selectors=JournalSelectors(
            issue_summary='.table.table-hover .btn',
            issue_info='.h6.fw-bold.d-block.mb-3',
            article_summary='td.pt-4.pb-4',
            article_title='.d-block.mt-2',
            article_author_items='.me-2',
            abstract_link_label='resumo',
            abstract_link_text='pt',
            doi='.item.doi .value a',
            abstract='.item.abstract',
            abstract_label='h3.label',
        ),
        abstract_prefix='resumo',
    ),
    'revista_habitus': JournalConfig(
        key='revista_habitus',
        name='Revista Habitus',
        file_name='revista_habitus.json',
        archive_urls=(f'{_HABITUS_ARCHIVE}/1', f'{_HABITUS_ARCHIVE}/2'),
        selectors=JournalSelectors(
            issue_series='div.series',
            abstract_label='h3.label',
            **_OJS_DEFAULT_SELECTORS,
        ),
    ),
}


def get_journal(key: str) -> JournalConfig:
    try:
        return JOURNALS[key]
    except KeyError:
        raise KeyError(f"Unknown journal '{key}'. Available: {', '.join(sorted(JOURNALS))}")
