"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   └── ValidationError
    ├── ApplicationError     (application.py)
    │   └── ConfigError      (config/validation)
    └── InfrastructureError  (infrastructure.py)
        └── QueryExecutionError
"""

from catalog_search.kernel.errors.application import ApplicationError
from catalog_search.kernel.errors.base import BaseError
from catalog_search.kernel.errors.domain import DomainError, ValidationError
from catalog_search.kernel.errors.infrastructure import InfrastructureError, QueryExecutionError

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "InfrastructureError",
    "QueryExecutionError",
    "ValidationError",
]
