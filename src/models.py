from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Article:
    """One article of an edition, as listed and then enriched from its detail page"""
    title: str
    url: str
    authors: List[str] = field(default_factory=list)
    doi: str = ''
    keywords: List[str] = field(default_factory=list)
    abstract: str = ''
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'url': self.url,
            'title': self.title,
            'authors': list(self.authors),
            'doi': self.doi,
            'keywords': list(self.keywords),
            'abstract': self.abstract,
        }
        if self.error is not None:
            data['error'] = self.error
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Article':
        return cls(
            title=data.get('title') or '',
            url=data.get('url') or '',
            authors=list(data.get('authors') or []),
            doi=data.get('doi') or '',
            keywords=list(data.get('keywords') or []),
            abstract=data.get('abstract') or '',
            error=data.get('error'),
        )


@dataclass(frozen=True)
class Edition:
    title: str
    url: str
    date: str = ''
    articles: List[Article] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'edition': self.title,
            'url': self.url,
            'date': self.date,
            'articles': [article.to_dict() for article in self.articles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Edition':
        return cls(
            title=data.get('edition') or '',
            url=data.get('url') or '',
            date=data.get('date') or '',
            articles=[Article.from_dict(item) for item in data.get('articles') or []],
        )
