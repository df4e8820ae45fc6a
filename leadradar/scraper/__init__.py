"""Page fetching and homepage metadata extraction."""

from .fetch_html import FetchResult, HtmlFetcher, fetch_html
from .metadata import ProjectSocials, extract_project_socials

__all__ = ["FetchResult", "HtmlFetcher", "ProjectSocials", "extract_project_socials", "fetch_html"]
