"""
Inclusive Hiring: the job matching and application lifecycle core of an
accessible jobs marketplace.

Employers post listings with accessibility facets, candidates search and
apply, applications move forward through a bounded status workflow, and
employer dashboards are derived from the same records.
"""

__version__ = "0.1.0"

from inclusive_hiring.service import MarketplaceService, create_service
from inclusive_hiring.storage.gateway import PersistenceGateway
from inclusive_hiring.storage.memory import InMemoryGateway

__all__ = [
    "MarketplaceService",
    "create_service",
    "PersistenceGateway",
    "InMemoryGateway",
]
