"""
catalog_search – product catalog search query compiler.

Import path convention::

    from catalog_search.application.search import SearchCriteriaCompiler, SearchRequest
    from catalog_search.application.search import QueryPlanBuilder
    from catalog_search.adapters.sqlalchemy import SqlAlchemySearchExecutor
    from catalog_search.kernel.errors import ValidationError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
