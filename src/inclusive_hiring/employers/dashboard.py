"""Employer dashboard figures derived from the catalog and application lists."""

import asyncio
from collections import Counter

from inclusive_hiring.core.models import ApplicationStatus, DashboardStats, JobApplicationCount
from inclusive_hiring.jobs.application import ApplicationLifecycleManager
from inclusive_hiring.jobs.catalog import JobCatalog
from inclusive_hiring.utils.logging import get_logger

logger = get_logger(__name__)


class EmployerListingAggregator:
    """Recomputes employer statistics on every call; nothing is cached."""

    def __init__(self, catalog: JobCatalog, applications: ApplicationLifecycleManager):
        self.logger = logger.bind(component="employer_dashboard")
        self.catalog = catalog
        self.applications = applications

    async def dashboard_stats(self, employer_id: str) -> DashboardStats:
        jobs = await self.catalog.list_by_employer(employer_id)
        per_job = await asyncio.gather(*(self.applications.list_for_job(job.id) for job in jobs))

        by_status: Counter = Counter()
        counts = []
        for job, applications in zip(jobs, per_job):
            by_status.update(application.status for application in applications)
            counts.append(JobApplicationCount(
                job_id=job.id,
                title=job.title,
                application_count=len(applications)
            ))

        stats = DashboardStats(
            employer_id=employer_id,
            active_job_count=len(jobs),
            total_applications=sum(count.application_count for count in counts),
            applications_by_status={status: by_status.get(status, 0) for status in ApplicationStatus},
            jobs=counts
        )
        self.logger.info(
            "Dashboard stats computed",
            employer_id=employer_id,
            active_job_count=stats.active_job_count,
            total_applications=stats.total_applications
        )
        return stats
