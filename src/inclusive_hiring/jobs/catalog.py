"""Job catalog: listing creation and candidate search over the jobs collection."""

from typing import Any, Dict, List, Optional

from inclusive_hiring.core.errors import (
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
)
from inclusive_hiring.core.models import EmployerProfile, Job, JobDraft, JobQuery
from inclusive_hiring.storage.gateway import SERVER_TIMESTAMP, Collection, PersistenceGateway
from inclusive_hiring.utils.logging import get_logger, log_operation

logger = get_logger(__name__)


class JobCatalog:
    """Read view over the job catalog plus the employer listing-creation operation."""

    def __init__(self, gateway: PersistenceGateway):
        self.logger = logger.bind(component="job_catalog")
        self.gateway = gateway

    async def list_all(self) -> List[Job]:
        """Every job, in insertion order."""
        records = await self.gateway.query(Collection.JOBS)
        return [Job.from_record(record) for record in records]

    async def list_by_employer(self, employer_id: str) -> List[Job]:
        """Jobs owned by ``employer_id``; an empty list when there are none."""
        records = await self.gateway.query(Collection.JOBS, employer_id=employer_id)
        return [Job.from_record(record) for record in records]

    async def get_job(self, job_id: str) -> Job:
        record = await self.gateway.get(Collection.JOBS, job_id)
        return Job.from_record(record)

    async def search(self, query: Optional[JobQuery] = None) -> List[Job]:
        """
        Evaluate a candidate query against the catalog.

        A job matches the text when it occurs, case-insensitively, in the title
        or the company name. Each requested facet must be true on the job. All
        predicates are ANDed and an empty query returns the full catalog.

        Args:
            query: Text and facet predicates

        Returns:
            Matching jobs in catalog order
        """
        query = query or JobQuery()
        jobs = await self.list_all()
        if query.is_empty:
            return jobs

        matches = [job for job in jobs if query.matches(job)]
        self.logger.debug(
            "Catalog searched",
            text=query.text,
            facets=sorted(facet.value for facet in query.facets),
            catalog_size=len(jobs),
            match_count=len(matches)
        )
        return matches

    async def post_job(self, employer_id: str, draft: JobDraft) -> Job:
        """
        Create a listing owned by ``employer_id``.

        Facet flags come from the draft. ``is_remote`` falls back to whether the
        location mentions "remote", and the company name falls back to the one
        on the employer's profile.

        Raises:
            UnauthenticatedError: No employer identity was supplied
            InvalidArgumentError: The title is empty
            NotFoundError: The employer has no profile
        """
        if not employer_id:
            raise UnauthenticatedError("Posting a job requires a signed-in employer")

        title = draft.title.strip()
        if not title:
            raise InvalidArgumentError("Job title must not be empty", details={"field": "title"})

        try:
            employer = EmployerProfile.from_record(
                await self.gateway.get(Collection.EMPLOYERS, employer_id)
            )
        except NotFoundError as e:
            self.logger.warning("Job posted by unknown employer", employer_id=employer_id)
            raise NotFoundError(
                f"Employer {employer_id} has no profile",
                details={"employer_id": employer_id}
            ) from e

        is_remote = draft.is_remote
        if is_remote is None:
            is_remote = "remote" in draft.location.lower()

        data: Dict[str, Any] = {
            "title": title,
            "employer_id": employer_id,
            "company_name": draft.company_name or employer.company_name or "",
            "location": draft.location,
            "salary": draft.salary,
            "description": draft.description,
            "accessibility_tags": list(draft.accessibility_tags),
            "is_remote": is_remote,
            "screen_reader_friendly": draft.screen_reader_friendly,
            "flexible_hours": draft.flexible_hours,
            "neurodiverse_inclusive": draft.neurodiverse_inclusive,
            "created_at": SERVER_TIMESTAMP,
        }
        job_id = await self.gateway.insert(Collection.JOBS, data)
        job = await self.get_job(job_id)

        self.logger.info(
            "Job posted",
            job_id=job.id,
            **log_operation("post_job", employer_id=employer_id, title=job.title)
        )
        return job
