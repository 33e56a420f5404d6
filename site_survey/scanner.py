# === FILE: site_survey/scanner.py ===
"""
Модуль-обёртка для функции запуска обхода.
"""
from typing import Optional

from site_survey.config import CrawlConfig
from site_survey.crawler.crawler import Crawler, ProgressCallback
from site_survey.crawler.models import CrawlResult


async def start_crawl(
    host: str,
    cfg: Optional[CrawlConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> CrawlResult:
    """
    Запускает краулер в контексте и возвращает CrawlResult.

    Parameters
    ----------
    host : str
        Стартовый хост, со схемой или без.
    cfg : CrawlConfig, optional
        Конфигурация обхода; по умолчанию CrawlConfig().
    on_progress : callable, optional
        Получает CrawlStatus после каждого шага.

    Returns
    -------
    CrawlResult
        Карта страниц и список ошибок.
    """
    async with Crawler(host, cfg, on_progress=on_progress) as crawler:
        return await crawler.crawl()

__all__ = ["start_crawl"]
