"""SQLAlchemy adapter – catalog models, query translation, async executor."""
from catalog_search.adapters.sqlalchemy.executor import SqlAlchemySearchExecutor
from catalog_search.adapters.sqlalchemy.mixins import SoftDeleteMixin, TimestampMixin
from catalog_search.adapters.sqlalchemy.models import Base, Category, Product, product_categories
from catalog_search.adapters.sqlalchemy.query import SqlAlchemyQueryContext
from catalog_search.adapters.sqlalchemy.session import SqlAlchemySessionFactory

__all__ = [
    "Base",
    "Category",
    "Product",
    "SoftDeleteMixin",
    "SqlAlchemyQueryContext",
    "SqlAlchemySearchExecutor",
    "SqlAlchemySessionFactory",
    "TimestampMixin",
    "product_categories",
]
