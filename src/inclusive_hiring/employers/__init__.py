"""Employer listing statistics."""

from .dashboard import EmployerListingAggregator

__all__ = ["EmployerListingAggregator"]
