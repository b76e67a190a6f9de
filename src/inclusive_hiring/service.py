"""Public surface of the core: one coroutine per exposed operation.

Every operation takes an optional ``timeout`` (seconds) that bounds each
gateway call it makes; a call that runs past it fails with UnavailableError.
"""

from typing import Iterable, List, Optional, Union

from pydantic import ValidationError

from inclusive_hiring.config import settings
from inclusive_hiring.core.errors import InvalidArgumentError
from inclusive_hiring.core.models import (
    Application,
    CandidateProfile,
    CourseLevel,
    DashboardStats,
    EmployerProfile,
    Facet,
    Identity,
    Job,
    JobDraft,
    JobQuery,
    SkillCourse,
    SkillCourseDraft,
)
from inclusive_hiring.employers.dashboard import EmployerListingAggregator
from inclusive_hiring.jobs.application import ApplicationLifecycleManager, StatusLike
from inclusive_hiring.jobs.catalog import JobCatalog
from inclusive_hiring.profiles.synchronizer import (
    CandidateFieldsLike,
    EmployerFieldsLike,
    ProfileSynchronizer,
)
from inclusive_hiring.storage.gateway import BoundedGateway, PersistenceGateway, request_timeout
from inclusive_hiring.storage.memory import InMemoryGateway
from inclusive_hiring.training.courses import SkillCourseCatalog
from inclusive_hiring.utils.logging import get_logger

logger = get_logger(__name__)


def build_query(text: Optional[str] = None, facets: Iterable[Union[Facet, str]] = ()) -> JobQuery:
    """Build a catalog query, reporting unknown facet names as InvalidArgumentError."""
    try:
        return JobQuery(text=text or None, facets=set(facets))
    except ValidationError as e:
        raise InvalidArgumentError(
            "Invalid job search query",
            details={"allowed_facets": [facet.value for facet in Facet], "errors": [error["msg"] for error in e.errors()]}
        ) from e


class MarketplaceService:
    """Wires the core components over one bounded gateway."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway if isinstance(gateway, BoundedGateway) else BoundedGateway(gateway)

        self.catalog = JobCatalog(self.gateway)
        self.applications = ApplicationLifecycleManager(self.gateway, self.catalog)
        self.profiles = ProfileSynchronizer(self.gateway)
        self.dashboard = EmployerListingAggregator(self.catalog, self.applications)
        self.courses = SkillCourseCatalog(self.gateway)

    # Job catalog

    async def search_jobs(
        self,
        text: Optional[str] = None,
        facets: Iterable[Union[Facet, str]] = (),
        *,
        timeout: Optional[float] = None
    ) -> List[Job]:
        query = build_query(text, facets)
        with request_timeout(timeout):
            return await self.catalog.search(query)

    async def list_all_jobs(self, *, timeout: Optional[float] = None) -> List[Job]:
        with request_timeout(timeout):
            return await self.catalog.list_all()

    async def get_job(self, job_id: str, *, timeout: Optional[float] = None) -> Job:
        with request_timeout(timeout):
            return await self.catalog.get_job(job_id)

    async def list_employer_jobs(self, employer_id: str, *, timeout: Optional[float] = None) -> List[Job]:
        with request_timeout(timeout):
            return await self.catalog.list_by_employer(employer_id)

    async def post_job(
        self,
        employer_id: str,
        draft: JobDraft,
        *,
        timeout: Optional[float] = None
    ) -> Job:
        with request_timeout(timeout):
            return await self.catalog.post_job(employer_id, draft)

    # Application lifecycle

    async def apply_to_job(
        self,
        candidate_id: str,
        job_id: str,
        *,
        idempotency_key: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> Application:
        with request_timeout(timeout):
            return await self.applications.apply(candidate_id, job_id, idempotency_key=idempotency_key)

    async def transition_application(
        self,
        application_id: str,
        new_status: StatusLike,
        *,
        expected_status: Optional[StatusLike] = None,
        actor_id: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> Application:
        with request_timeout(timeout):
            return await self.applications.transition(
                application_id,
                new_status,
                expected_status=expected_status,
                actor_id=actor_id
            )

    async def withdraw_application(
        self,
        application_id: str,
        candidate_id: str,
        *,
        expected_status: Optional[StatusLike] = None,
        timeout: Optional[float] = None
    ) -> Application:
        with request_timeout(timeout):
            return await self.applications.withdraw(
                application_id,
                candidate_id,
                expected_status=expected_status
            )

    async def get_application(self, application_id: str, *, timeout: Optional[float] = None) -> Application:
        with request_timeout(timeout):
            return await self.applications.get_application(application_id)

    async def list_candidate_applications(
        self,
        candidate_id: str,
        status: Optional[StatusLike] = None,
        *,
        timeout: Optional[float] = None
    ) -> List[Application]:
        with request_timeout(timeout):
            return await self.applications.list_for_candidate(candidate_id, status)

    async def list_job_applications(self, job_id: str, *, timeout: Optional[float] = None) -> List[Application]:
        with request_timeout(timeout):
            return await self.applications.list_for_job(job_id)

    # Profiles

    async def upsert_candidate_profile(
        self,
        identity: str,
        fields: CandidateFieldsLike,
        *,
        timeout: Optional[float] = None
    ) -> CandidateProfile:
        with request_timeout(timeout):
            return await self.profiles.upsert_candidate_profile(identity, fields)

    async def upsert_employer_profile(
        self,
        identity: str,
        fields: EmployerFieldsLike,
        *,
        timeout: Optional[float] = None
    ) -> EmployerProfile:
        with request_timeout(timeout):
            return await self.profiles.upsert_employer_profile(identity, fields)

    async def on_identity_established(
        self,
        identity: Identity,
        *,
        timeout: Optional[float] = None
    ) -> Union[CandidateProfile, EmployerProfile]:
        with request_timeout(timeout):
            return await self.profiles.on_identity_established(identity)

    # Employer dashboard

    async def employer_dashboard_stats(
        self,
        employer_id: str,
        *,
        timeout: Optional[float] = None
    ) -> DashboardStats:
        with request_timeout(timeout):
            return await self.dashboard.dashboard_stats(employer_id)

    # Skill training

    async def add_skill_course(
        self,
        draft: SkillCourseDraft,
        *,
        timeout: Optional[float] = None
    ) -> SkillCourse:
        with request_timeout(timeout):
            return await self.courses.add_course(draft)

    async def search_skill_courses(
        self,
        text: Optional[str] = None,
        level: Optional[Union[CourseLevel, str]] = None,
        *,
        timeout: Optional[float] = None
    ) -> List[SkillCourse]:
        with request_timeout(timeout):
            return await self.courses.search_courses(text, level)


def create_service(gateway: Optional[PersistenceGateway] = None) -> MarketplaceService:
    """Create a service over ``gateway``, defaulting to a fresh in-memory store."""
    if gateway is None:
        gateway = InMemoryGateway(latency=settings.gateway_latency_seconds)
        logger.info("Using in-memory gateway", latency_seconds=settings.gateway_latency_seconds)
    return MarketplaceService(gateway)
