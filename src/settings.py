import os
from dataclasses import dataclass

DEFAULT_USER_AGENT = 'Mozilla/5.0 (compatible; PeriodicalArchiveScraper/1.0)'


@dataclass(frozen=True)
class RetryPolicy:
    """How many times a page fetch is attempted and how long to wait between attempts"""
    max_attempts: int = 2
    backoff_seconds: float = 1.0
    max_backoff_seconds: float = 8.0


@dataclass(frozen=True)
class ScraperSettings:
    output_dir: str = 'raw'
    max_workers: int = 4
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    retry: RetryPolicy = RetryPolicy()

    @classmethod
    def from_env(cls) -> 'ScraperSettings':
        """Build settings from SCRAPER_* environment variables"""
        retry = RetryPolicy(
            max_attempts=_env_int('SCRAPER_MAX_ATTEMPTS', 2),
            backoff_seconds=_env_float('SCRAPER_BACKOFF_SECONDS', 1.0),
            max_backoff_seconds=_env_float('SCRAPER_MAX_BACKOFF_SECONDS', 8.0),
        )
        if retry.max_attempts < 1:
            raise ValueError("SCRAPER_MAX_ATTEMPTS must be at least 1")

        max_workers = _env_int('SCRAPER_MAX_WORKERS', 4)
        if max_workers < 1:
            raise ValueError("SCRAPER_MAX_WORKERS must be at least 1")

        return cls(
            output_dir=os.getenv('SCRAPER_OUTPUT_DIR', 'raw'),
            max_workers=max_workers,
            timeout=_env_float('SCRAPER_TIMEOUT', 30.0),
            user_agent=os.getenv('SCRAPER_USER_AGENT', DEFAULT_USER_AGENT),
            retry=retry,
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
