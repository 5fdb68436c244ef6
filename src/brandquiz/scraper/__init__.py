"""Website text extraction."""

from brandquiz.scraper.fetch import WebsiteTextExtractor, extract_content, normalize_url

__all__ = ["WebsiteTextExtractor", "extract_content", "normalize_url"]
