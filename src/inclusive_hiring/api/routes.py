"""API routes for the Inclusive Hiring marketplace.

Core errors propagate to the exception handlers registered in ``main``,
which turn them into ``ErrorResponse`` bodies with the error's status code.
"""

from typing import List, Optional, Union
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from inclusive_hiring import __version__
from inclusive_hiring.api.models import (
    ApplyRequest, TransitionRequest, WithdrawRequest, IdentityEventRequest, EmployerProfileUpdate,
    JobSearchResponse, HealthCheck
)
from inclusive_hiring.core.errors import ForbiddenError, UnauthenticatedError
from inclusive_hiring.core.models import (
    Application, ApplicationStatus, CandidateProfile, CandidateProfileFields,
    CourseLevel, DashboardStats, EmployerProfile, EmployerProfileFields,
    Facet, Identity, Job, JobDraft, SkillCourse, SkillCourseDraft
)
from inclusive_hiring.service import MarketplaceService
from inclusive_hiring.utils.logging import get_logger

logger = get_logger(__name__)
security = HTTPBearer(auto_error=False)

# Global instance (initialized in main.py lifespan)
service: Optional[MarketplaceService] = None

# Create routers
jobs_router = APIRouter(prefix="/jobs", tags=["jobs"])
applications_router = APIRouter(prefix="/applications", tags=["applications"])
candidates_router = APIRouter(prefix="/candidates", tags=["candidates"])
employers_router = APIRouter(prefix="/employers", tags=["employers"])
profiles_router = APIRouter(prefix="/profiles", tags=["profiles"])
courses_router = APIRouter(prefix="/courses", tags=["courses"])
health_router = APIRouter(prefix="/health", tags=["health"])


def get_service() -> MarketplaceService:
    if not service:
        raise HTTPException(status_code=503, detail="Marketplace service not initialized")
    return service


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Optional[str]:
    """Identity verified upstream by the authentication layer, carried as the bearer token."""
    if not credentials or not credentials.credentials.strip():
        return None
    return credentials.credentials.strip()


async def require_user(user_id: Optional[str] = Depends(get_current_user)) -> str:
    if not user_id:
        raise UnauthenticatedError("A signed-in identity is required")
    return user_id


def require_self(user_id: str, owner_id: str) -> None:
    if user_id != owner_id:
        raise ForbiddenError("Identity may only read its own records", details={"owner_id": owner_id})


@jobs_router.get("", response_model=JobSearchResponse)
async def search_jobs(
    text: Optional[str] = Query(None, description="Substring of title or company"),
    facets: List[Facet] = Query(default=[], description="Facets that must all be true"),
    marketplace: MarketplaceService = Depends(get_service)
):
    """Search the job catalog."""
    jobs = await marketplace.search_jobs(text, facets)
    logger.info("Job search served", text=text, facets=[facet.value for facet in facets], results=len(jobs))
    return JobSearchResponse(
        success=True,
        jobs=jobs,
        total_count=len(jobs),
        search_metadata={
            "text": text,
            "facets": sorted(facet.value for facet in facets),
            "search_time": datetime.now(timezone.utc).isoformat()
        }
    )


@jobs_router.post("", response_model=Job, status_code=status.HTTP_201_CREATED)
async def post_job(
    draft: JobDraft,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    """Create a listing owned by the signed-in employer."""
    return await marketplace.post_job(user_id, draft)


@jobs_router.get("/{job_id}", response_model=Job)
async def get_job(job_id: str, marketplace: MarketplaceService = Depends(get_service)):
    return await marketplace.get_job(job_id)


@jobs_router.get("/{job_id}/applications", response_model=List[Application])
async def list_job_applications(
    job_id: str,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    """Applications for a job, visible to the employer who owns it."""
    job = await marketplace.get_job(job_id)
    require_self(user_id, job.employer_id)
    return await marketplace.list_job_applications(job_id)


@applications_router.post("", response_model=Application, status_code=status.HTTP_201_CREATED)
async def apply_to_job(
    request: ApplyRequest,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    """Apply the signed-in candidate to a job."""
    return await marketplace.apply_to_job(user_id, request.job_id, idempotency_key=request.idempotency_key)


@applications_router.get("/{application_id}", response_model=Application)
async def get_application(
    application_id: str,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    application = await marketplace.get_application(application_id)
    if user_id != application.candidate_id:
        job = await marketplace.get_job(application.job_id)
        require_self(user_id, job.employer_id)
    return application


@applications_router.post("/{application_id}/transition", response_model=Application)
async def transition_application(
    application_id: str,
    request: TransitionRequest,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    """Employer review action on an application for one of their jobs."""
    return await marketplace.transition_application(
        application_id,
        request.status,
        expected_status=request.expected_status,
        actor_id=user_id
    )


@applications_router.post("/{application_id}/withdraw", response_model=Application)
async def withdraw_application(
    application_id: str,
    request: WithdrawRequest,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    return await marketplace.withdraw_application(
        application_id,
        user_id,
        expected_status=request.expected_status
    )


@candidates_router.get("/{candidate_id}/applications", response_model=List[Application])
async def list_candidate_applications(
    candidate_id: str,
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    require_self(user_id, candidate_id)
    return await marketplace.list_candidate_applications(candidate_id, application_status)


@employers_router.get("/{employer_id}/jobs", response_model=List[Job])
async def list_employer_jobs(employer_id: str, marketplace: MarketplaceService = Depends(get_service)):
    return await marketplace.list_employer_jobs(employer_id)


@employers_router.get("/{employer_id}/dashboard", response_model=DashboardStats)
async def employer_dashboard(
    employer_id: str,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    require_self(user_id, employer_id)
    return await marketplace.employer_dashboard_stats(employer_id)


@profiles_router.put("/candidate", response_model=CandidateProfile)
async def upsert_candidate_profile(
    fields: CandidateProfileFields,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    return await marketplace.upsert_candidate_profile(user_id, fields)


@profiles_router.put("/employer", response_model=EmployerProfile)
async def upsert_employer_profile(
    update: EmployerProfileUpdate,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    fields = EmployerProfileFields(**update.model_dump())
    return await marketplace.upsert_employer_profile(user_id, fields)


@profiles_router.post("/identity", response_model=Union[EmployerProfile, CandidateProfile])
async def identity_established(
    event: IdentityEventRequest,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    """Forwarded sign-in event; creates or refreshes the account's profile."""
    identity = Identity(uid=user_id, role=event.role, display_name=event.display_name, email=event.email)
    return await marketplace.on_identity_established(identity)


@courses_router.get("", response_model=List[SkillCourse])
async def search_courses(
    text: Optional[str] = Query(None, description="Substring of name or description"),
    level: Optional[CourseLevel] = Query(None, description="Course level"),
    marketplace: MarketplaceService = Depends(get_service)
):
    return await marketplace.search_skill_courses(text, level)


@courses_router.post("", response_model=SkillCourse, status_code=status.HTTP_201_CREATED)
async def add_course(
    draft: SkillCourseDraft,
    user_id: str = Depends(require_user),
    marketplace: MarketplaceService = Depends(get_service)
):
    logger.info("Skill course submitted", user_id=user_id, name=draft.name)
    return await marketplace.add_skill_course(draft)


@health_router.get("", response_model=HealthCheck)
async def health_check():
    """Health check endpoint."""
    components = {
        "marketplace_service": "healthy" if service else "unavailable",
        "gateway": type(service.gateway.inner).__name__ if service else "unavailable",
    }
    overall_status = "healthy" if service else "degraded"

    return HealthCheck(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        components=components
    )


# Export all routers
all_routers = [
    jobs_router,
    applications_router,
    candidates_router,
    employers_router,
    profiles_router,
    courses_router,
    health_router
]
