"""Shared entities and the error taxonomy."""

from .errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    InvalidTransitionError,
    MarketplaceError,
    NotFoundError,
    UnauthenticatedError,
    UnavailableError,
)
from .models import (
    Application,
    ApplicationStatus,
    CandidateProfile,
    CandidateProfileFields,
    DashboardStats,
    EmployerProfile,
    EmployerProfileFields,
    Facet,
    Identity,
    Job,
    JobDraft,
    JobQuery,
    Role,
    SkillCourse,
    SkillCourseDraft,
)

__all__ = [
    "ConflictError",
    "ForbiddenError",
    "InvalidArgumentError",
    "InvalidTransitionError",
    "MarketplaceError",
    "NotFoundError",
    "UnauthenticatedError",
    "UnavailableError",
    "Application",
    "ApplicationStatus",
    "CandidateProfile",
    "CandidateProfileFields",
    "DashboardStats",
    "EmployerProfile",
    "EmployerProfileFields",
    "Facet",
    "Identity",
    "Job",
    "JobDraft",
    "JobQuery",
    "Role",
    "SkillCourse",
    "SkillCourseDraft",
]
