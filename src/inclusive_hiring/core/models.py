"""Core data models for the Inclusive Hiring marketplace."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import BaseModel, Field, field_validator


class ApplicationStatus(str, Enum):
    """Application status in forward order.

    Selected, Rejected and Withdrawn are terminal. Rejected and Withdrawn are
    reachable from every non-terminal status.
    """
    APPLIED = "Applied"
    UNDER_REVIEW = "UnderReview"
    INTERVIEW = "Interview"
    SELECTED = "Selected"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"

    @classmethod
    def _missing_(cls, value: object) -> Optional["ApplicationStatus"]:
        # Accept display spellings such as "Under Review" or "under_review"
        if isinstance(value, str):
            normalized = value.replace(" ", "").replace("_", "").lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return None

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    def can_transition_to(self, target: "ApplicationStatus") -> bool:
        """Forward-only: the target must rank strictly later and we must not be terminal."""
        return not self.is_terminal and target.rank > self.rank


_STATUS_RANK = {
    ApplicationStatus.APPLIED: 0,
    ApplicationStatus.UNDER_REVIEW: 1,
    ApplicationStatus.INTERVIEW: 2,
    ApplicationStatus.SELECTED: 3,
    ApplicationStatus.REJECTED: 3,
    ApplicationStatus.WITHDRAWN: 3,
}

TERMINAL_STATUSES = frozenset({
    ApplicationStatus.SELECTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WITHDRAWN,
})


class Facet(str, Enum):
    """Boolean accessibility / work-mode attributes used for filtering."""
    REMOTE = "remote"
    SCREEN_READER = "screen_reader"
    FLEXIBLE_HOURS = "flexible_hours"
    NEURODIVERSE = "neurodiverse"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Facet"]:
        # Accept "screenReader", "Flexible Hours" and similar spellings
        if isinstance(value, str):
            normalized = value.replace(" ", "").replace("_", "").lower()
            for member in cls:
                if member.value.replace("_", "") == normalized:
                    return member
        return None


# Job attribute backing each facet
FACET_FIELDS: Dict[Facet, str] = {
    Facet.REMOTE: "is_remote",
    Facet.SCREEN_READER: "screen_reader_friendly",
    Facet.FLEXIBLE_HOURS: "flexible_hours",
    Facet.NEURODIVERSE: "neurodiverse_inclusive",
}


class Role(str, Enum):
    """Account role handed over by the authentication collaborator."""
    CANDIDATE = "candidate"
    EMPLOYER = "employer"


def parse_tags(value: Union[str, List[str], None]) -> List[str]:
    """Split a comma-separated tag string (or clean a list), keeping order and dropping blanks."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


class Job(BaseModel):
    """An employer-posted job in the catalog."""
    id: str = Field(..., description="Gateway-assigned job identifier")
    title: str = Field(..., description="Job title")
    employer_id: str = Field(..., description="Owning employer identity")
    company_name: str = Field("", description="Company name")
    location: str = Field("", description="Job location")
    salary: Optional[str] = Field(None, description="Free-text salary")
    description: str = Field("", description="Job description")
    accessibility_tags: List[str] = Field(default_factory=list, description="Ordered accessibility labels")
    is_remote: bool = Field(False, description="Remote work available")
    screen_reader_friendly: bool = Field(False, description="Screen reader friendly tooling")
    flexible_hours: bool = Field(False, description="Flexible working hours")
    neurodiverse_inclusive: bool = Field(False, description="Neurodiverse inclusive hiring")
    created_at: datetime = Field(..., description="Creation time, set once by the gateway")

    def has_facet(self, facet: Facet) -> bool:
        return bool(getattr(self, FACET_FIELDS[facet]))

    @classmethod
    def from_record(cls, record: "StoredRecord") -> "Job":
        return cls(id=record.id, **record.data)


class JobDraft(BaseModel):
    """Employer input for a new listing."""
    title: str = Field(..., description="Job title")
    company_name: Optional[str] = Field(None, description="Defaults to the employer profile's company")
    location: str = Field("", description="Job location")
    salary: Optional[str] = Field(None, description="Free-text salary")
    description: str = Field("", description="Job description")
    accessibility_tags: List[str] = Field(default_factory=list, description="Tags as a list or comma-separated string")
    is_remote: Optional[bool] = Field(None, description="Derived from location when omitted")
    screen_reader_friendly: bool = Field(False, description="Screen reader friendly tooling")
    flexible_hours: bool = Field(False, description="Flexible working hours")
    neurodiverse_inclusive: bool = Field(False, description="Neurodiverse inclusive hiring")

    @field_validator("accessibility_tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> List[str]:
        return parse_tags(value)


class JobQuery(BaseModel):
    """Candidate search over the catalog. Every supplied predicate must hold."""
    text: Optional[str] = Field(None, description="Case-insensitive substring of title or company")
    facets: Set[Facet] = Field(default_factory=set, description="Facets that must all be true")

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.facets

    def matches(self, job: Job) -> bool:
        if self.text:
            needle = self.text.lower()
            if needle not in job.title.lower() and needle not in job.company_name.lower():
                return False
        return all(job.has_facet(facet) for facet in self.facets)


class Identity(BaseModel):
    """Verified identity supplied by the authentication collaborator."""
    uid: str = Field(..., description="Opaque account identifier")
    role: Role = Field(..., description="Account role")
    display_name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address")


class CandidateProfileFields(BaseModel):
    """Partial candidate profile; fields left as None are not written."""
    display_name: Optional[str] = None
    email: Optional[str] = None
    education: Optional[str] = None
    experience_level: Optional[str] = None
    location: Optional[str] = None
    disability_type: Optional[str] = None
    disability_level: Optional[str] = None
    preferred_job_type: Optional[str] = None
    skills: Optional[List[str]] = None
    resume_url: Optional[str] = None

    @field_validator("skills")
    @classmethod
    def _skills_as_set(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        # Stored sorted and de-duplicated so equal sets compare equal
        if value is None:
            return None
        return sorted({skill.strip() for skill in value if skill and skill.strip()})


class CandidateProfile(CandidateProfileFields):
    """Candidate profile keyed by account identity."""
    uid: str = Field(..., description="Account identity")
    skills: List[str] = Field(default_factory=list, description="Skill set, sorted")
    created_at: datetime = Field(..., description="Set by the first upsert only")

    @classmethod
    def from_record(cls, record: "StoredRecord") -> "CandidateProfile":
        return cls(uid=record.id, **record.data)


class EmployerProfileFields(BaseModel):
    """Partial employer profile; fields left as None are not written."""
    display_name: Optional[str] = None
    company_name: Optional[str] = None
    contact_email: Optional[str] = None
    verified: Optional[bool] = None


class EmployerProfile(EmployerProfileFields):
    """Employer profile keyed by account identity."""
    uid: str = Field(..., description="Account identity")
    verified: bool = Field(False, description="Verified employer")
    created_at: datetime = Field(..., description="Set by the first upsert only")

    @classmethod
    def from_record(cls, record: "StoredRecord") -> "EmployerProfile":
        return cls(uid=record.id, **record.data)


class Application(BaseModel):
    """A candidate's claim against one job."""
    id: str = Field(..., description="Application identifier")
    job_id: str = Field(..., description="Referenced job")
    candidate_id: str = Field(..., description="Applying candidate")
    job_title: str = Field(..., description="Job title captured at apply time")
    company_name: str = Field("", description="Company captured at apply time")
    status: ApplicationStatus = Field(ApplicationStatus.APPLIED, description="Workflow status")
    applied_at: datetime = Field(..., description="Apply time, set once by the gateway")
    updated_at: Optional[datetime] = Field(None, description="Last status change")
    idempotency_key: Optional[str] = Field(
        None, exclude=True, description="Client key of the creating request; never serialized"
    )
    version: int = Field(1, description="Optimistic concurrency version")

    @classmethod
    def from_record(cls, record: "StoredRecord") -> "Application":
        return cls(id=record.id, version=record.version, **record.data)


class JobApplicationCount(BaseModel):
    """Application count for one listing."""
    job_id: str
    title: str
    application_count: int


class DashboardStats(BaseModel):
    """Employer dashboard figures, recomputed per request."""
    employer_id: str = Field(..., description="Employer identity")
    active_job_count: int = Field(0, description="Jobs owned by the employer")
    total_applications: int = Field(0, description="Applications across those jobs")
    applications_by_status: Dict[ApplicationStatus, int] = Field(default_factory=dict)
    jobs: List[JobApplicationCount] = Field(default_factory=list)


class CourseLevel(str, Enum):
    """Skill course difficulty."""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class CourseFormats(BaseModel):
    """Accessible delivery formats of a course."""
    text: bool = False
    audio: bool = False
    video: bool = False
    sign_language: bool = False


class SkillCourseDraft(BaseModel):
    """Input for a new training course."""
    name: str
    description: str = ""
    duration: str = ""
    level: CourseLevel = CourseLevel.BEGINNER
    formats: CourseFormats = Field(default_factory=CourseFormats)


class SkillCourse(SkillCourseDraft):
    """A skill training course."""
    id: str

    @classmethod
    def from_record(cls, record: "StoredRecord") -> "SkillCourse":
        return cls(id=record.id, **record.data)
