"""
Text cleanup helpers shared by every journal.

The functions taking a BeautifulSoup node read only what their selector points
at; everything else here is plain string handling.
"""

import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

_QUOTES_RE = re.compile(r'["“”‘’]')
_WHITESPACE_RE = re.compile(r'\s+')
_PDF_MARKER_RE = re.compile(r'\bpdf\b', re.IGNORECASE)
_INITIALS_RE = re.compile(r'^(?:[A-ZÀ-ÖØ-Þ]\.[\s-]*)+$')
_HEADING_RE = re.compile(r'^h[1-6]$')

_VOLUME_RE = re.compile(r'Volume:\s*([^\s,]+)', re.IGNORECASE)
_NUMBER_RE = re.compile(r'Número:\s*([^\s,]+)', re.IGNORECASE)
_PUBLISHED_RE = re.compile(r'Publicado:\s*([^\s,]+)', re.IGNORECASE)


def collapse_whitespace(text: str) -> str:
    if not text:
        return ""
    return _WHITESPACE_RE.sub(' ', text).strip()


def normalize_quotes(text: str) -> str:
    """Replace straight and curly quotes with a plain apostrophe"""
    if not text:
        return ""
    return _QUOTES_RE.sub("'", text)


def clean_title(text: str) -> str:
    """Drop 'PDF' link markers and collapse whitespace; applying it twice changes nothing"""
    if not text:
        return ""
    return collapse_whitespace(_PDF_MARKER_RE.sub(' ', text))


def split_authors(authors_text: str) -> List[str]:
    """
    Split a raw author line into names.

    Semicolons win when present, so 'Silva, J.; Souza, M.' keeps each
    'Last, First' name whole. Otherwise commas separate authors, except that a
    token made only of initials is glued back onto the surname before it.
    """
    if not authors_text:
        return []

    text = normalize_quotes(authors_text)

    if ';' in text:
        return [name for name in (collapse_whitespace(part) for part in text.split(';')) if name]

    names: List[str] = []
    for part in text.split(','):
        token = collapse_whitespace(part)
        if not token:
            continue
        if names and _INITIALS_RE.match(token):
            names[-1] = f"{names[-1]}, {token}"
        else:
            names.append(token)
    return names


def reorder_author_name(name: str) -> str:
    """Turn 'Last, First' into 'First Last'; names without exactly one comma are kept"""
    parts = name.split(',')
    if len(parts) == 2:
        return collapse_whitespace(f"{parts[1]} {parts[0]}")
    return collapse_whitespace(name)


def strip_date_prefix(text: str, prefix_pattern: Optional[str]) -> str:
    text = collapse_whitespace(text)
    if not prefix_pattern:
        return text
    return re.sub(rf'^(?:{prefix_pattern})\s*', '', text, flags=re.IGNORECASE).strip()


def parse_issue_info(text: str) -> Tuple[str, str, str]:
    """Read (volume, number, published) out of a 'Volume: 1, Número: 2, Publicado: 2020' line"""
    values = []
    for pattern in (_VOLUME_RE, _NUMBER_RE, _PUBLISHED_RE):
        match = pattern.search(text or '')
        values.append(match.group(1) if match else '')
    return values[0], values[1], values[2]


def extract_doi(soup: BeautifulSoup, selector: Optional[str]) -> str:
    if not selector:
        return ""
    node = soup.select_one(selector)
    if node is None:
        return ""
    href = node.get('href')
    if href:
        return href.strip()
    return node.get_text().strip()


def extract_keyword_nodes(soup: BeautifulSoup, selector: str, split_sentences: bool = False) -> List[str]:
    keywords = []
    for node in soup.select(selector):
        text = collapse_whitespace(node.get_text())
        if not text:
            continue
        if split_sentences and '. ' in text:
            for part in text.split('. '):
                part = part.strip().rstrip('.').strip()
                if part:
                    keywords.append(part)
        else:
            keywords.append(text)
    return keywords


def extract_keywords_regex(page_text: str, pattern: str) -> List[str]:
    """Find a 'Palavras-chave: a, b, c' style line in the page text and split it on commas"""
    match = re.search(pattern, page_text or '', re.IGNORECASE)
    if not match or not match.group(1):
        return []

    keywords = []
    for part in normalize_quotes(match.group(1)).split(','):
        keyword = collapse_whitespace(part).rstrip('.').strip()
        if keyword:
            keywords.append(keyword)
    return keywords


def extract_abstract(soup: BeautifulSoup, selector: Optional[str], label_selector: Optional[str] = None,
                     prefix: Optional[str] = None) -> str:
    if not selector:
        return ""
    container = soup.select_one(selector)
    if container is None:
        return ""

    paragraphs = container.find_all('p')
    if paragraphs:
        text = ' '.join(p.get_text() for p in paragraphs)
    else:
        if label_selector:
            label = container.select_one(label_selector)
        else:
            label = container.find(_HEADING_RE)
        if label is not None:
            label.extract()
        text = container.get_text()

    text = normalize_quotes(collapse_whitespace(text))

    if prefix and text.lower().startswith(prefix.lower() + ' '):
        text = text[len(prefix) + 1:].strip()
    return text


def find_abstract_link(summary: Tag, label: str, link_text: str) -> Optional[str]:
    """Find the link to the abstract in the requested language inside an article summary"""
    for item in summary.select('li.nav-item'):
        strong = item.find('strong')
        if strong is None or not strong.get_text(strip=True).lower().startswith(label.lower()):
            continue
        for anchor in item.find_all('a'):
            if anchor.get_text(strip=True).lower() == link_text.lower() and anchor.get('href'):
                return anchor['href']
    return None
