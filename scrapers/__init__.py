"""
Scrapers Module
"""
from .base import BaseScraper
from .sage_scraper import SageScraper

__all__ = [
    "BaseScraper",
    "SageScraper",
]
