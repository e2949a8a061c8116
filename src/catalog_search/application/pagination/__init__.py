"""Application pagination – pagination params and result pages."""
from catalog_search.application.pagination.page import Page
from catalog_search.application.pagination.params import PaginationParams

__all__ = ["Page", "PaginationParams"]
