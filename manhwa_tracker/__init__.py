"""Manhwa tracker: latest-chapter feed scraped from the asuracomic.net homepage.

The FastAPI app lives in ``manhwa_tracker.main``; scraping, caching and
filtering live under ``manhwa_tracker.services``.
"""

__version__ = "0.1.0"
