"""SQLAlchemy ORM models for the product catalog read side."""
from __future__ import annotations

import decimal
import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Table, Text, Uuid, true
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from catalog_search.adapters.sqlalchemy.mixins import SoftDeleteMixin, TimestampMixin


class Base(DeclarativeBase):
    pass


product_categories = Table(
    "product_categories",
    Base.metadata,
    Column("product_id", Uuid, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Uuid, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Category(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(255), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())

    products: Mapped[list["Product"]] = relationship(
        secondary=product_categories, back_populates="categories"
    )


class Product(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(500), index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    sku: Mapped[str] = mapped_column(String(100), unique=True)
    price: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2))
    stock: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    rating: Mapped[decimal.Decimal | None] = mapped_column(Numeric(3, 2), nullable=True, default=None)
    order_count: Mapped[int] = mapped_column(Integer, default=0)
    view_count: Mapped[int] = mapped_column(Integer, default=0)

    categories: Mapped[list[Category]] = relationship(
        secondary=product_categories, back_populates="products"
    )

    def __repr__(self) -> str:
        return f"Product(id={self.id!s}, sku={self.sku!r})"


__all__ = ["Base", "Category", "Product", "product_categories"]
