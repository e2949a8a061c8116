"""Kernel DDD – value object base."""
from catalog_search.kernel.ddd.value_object import ValueObject

__all__ = ["ValueObject"]
