"""Demo employers, listings, candidates and courses for the CLI and the demo server."""

from dataclasses import dataclass, field
from typing import Dict, List

from inclusive_hiring.core.models import (
    CandidateProfileFields,
    CourseFormats,
    CourseLevel,
    EmployerProfileFields,
    JobDraft,
    SkillCourseDraft,
)
from inclusive_hiring.service import MarketplaceService
from inclusive_hiring.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DemoEmployer:
    """An employer account with the listings it posts."""
    uid: str
    profile: EmployerProfileFields
    listings: List[JobDraft] = field(default_factory=list)


@dataclass
class DemoCandidate:
    """A candidate account."""
    uid: str
    profile: CandidateProfileFields


class DemoDataGenerator:
    """Builds a small, realistic accessible-jobs marketplace."""

    def get_employers(self) -> List[DemoEmployer]:
        return [
            DemoEmployer(
                uid="employer-techcorp",
                profile=EmployerProfileFields(
                    company_name="Tech Corp",
                    contact_email="hiring@techcorp.example",
                    verified=True
                ),
                listings=[
                    JobDraft(
                        title="Frontend Developer",
                        location="Remote",
                        salary="₹8-12 LPA",
                        description="Build accessible React interfaces with our design system team.",
                        accessibility_tags="Remote, Flexible Hours",
                        flexible_hours=True
                    ),
                    JobDraft(
                        title="QA Engineer",
                        location="Bengaluru",
                        description="Manual and automated accessibility testing with NVDA and VoiceOver.",
                        accessibility_tags=["Screen Reader"],
                        screen_reader_friendly=True,
                        neurodiverse_inclusive=True
                    ),
                ]
            ),
            DemoEmployer(
                uid="employer-designify",
                profile=EmployerProfileFields(
                    company_name="Designify",
                    contact_email="jobs@designify.example",
                    verified=False
                ),
                listings=[
                    JobDraft(
                        title="UX Designer",
                        location="Mumbai (hybrid)",
                        description="Inclusive research and design for public sector services.",
                        accessibility_tags="Sign Language, Flexible Hours",
                        flexible_hours=True,
                        neurodiverse_inclusive=True
                    ),
                ]
            ),
        ]

    def get_candidates(self) -> List[DemoCandidate]:
        return [
            DemoCandidate(
                uid="candidate-jane",
                profile=CandidateProfileFields(
                    display_name="Jane Doe",
                    education="B.Tech",
                    experience_level="Fresher",
                    location="Mumbai",
                    disability_type="Visual",
                    disability_level="Medium",
                    preferred_job_type="Remote",
                    skills=["Python", "Excel"]
                )
            ),
        ]

    def get_courses(self) -> List[SkillCourseDraft]:
        return [
            SkillCourseDraft(
                name="Web Accessibility Fundamentals",
                description="WCAG principles, semantic HTML and ARIA basics.",
                duration="4 weeks",
                level=CourseLevel.BEGINNER,
                formats=CourseFormats(text=True, audio=True, video=True, sign_language=True)
            ),
            SkillCourseDraft(
                name="Python for Data Analysis",
                description="Pandas, cleaning and visualising data with screen-reader friendly notebooks.",
                duration="6 weeks",
                level=CourseLevel.INTERMEDIATE,
                formats=CourseFormats(text=True, audio=True)
            ),
        ]


async def seed_demo_data(service: MarketplaceService) -> Dict[str, int]:
    """Load the demo marketplace into ``service`` and return how much was created."""
    generator = DemoDataGenerator()
    created = {"employers": 0, "jobs": 0, "candidates": 0, "courses": 0}

    for employer in generator.get_employers():
        await service.upsert_employer_profile(employer.uid, employer.profile)
        created["employers"] += 1
        for draft in employer.listings:
            await service.post_job(employer.uid, draft)
            created["jobs"] += 1

    for candidate in generator.get_candidates():
        await service.upsert_candidate_profile(candidate.uid, candidate.profile)
        created["candidates"] += 1

    for course in generator.get_courses():
        await service.add_skill_course(course)
        created["courses"] += 1

    logger.info("Demo data seeded", **created)
    return created
