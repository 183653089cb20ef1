from .canvas_scraper import CanvasScraper, PlannerLink
from .extractors import ContentType, classify_content

__all__ = ["CanvasScraper", "PlannerLink", "ContentType", "classify_content"]
