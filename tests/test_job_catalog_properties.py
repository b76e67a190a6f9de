"""Property-based tests for job catalog search and listing creation."""

import asyncio
import pytest
from hypothesis import given, strategies as st, settings, HealthCheck
from typing import List

from inclusive_hiring.core.errors import (
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
)
from inclusive_hiring.core.models import EmployerProfileFields, Facet, Job, JobDraft, JobQuery
from inclusive_hiring.service import MarketplaceService, build_query, create_service
from inclusive_hiring.storage.memory import InMemoryGateway

# Small alphabet so generated queries actually hit generated titles
WORD_ALPHABET = "abcdeABCDE "


@st.composite
def job_draft_strategy(draw):
    """Generate listing drafts with arbitrary facet flags."""
    title = draw(st.text(alphabet=WORD_ALPHABET, min_size=1, max_size=12).filter(lambda s: s.strip()))
    return JobDraft(
        title=title,
        company_name=draw(st.text(alphabet=WORD_ALPHABET, min_size=1, max_size=8).filter(lambda s: s.strip())),
        location=draw(st.sampled_from(["Remote", "Pune", "Delhi (remote friendly)", ""])),
        accessibility_tags=draw(st.lists(st.sampled_from(["Remote", "Screen Reader", "Ramps"]), max_size=3)),
        is_remote=draw(st.booleans()),
        screen_reader_friendly=draw(st.booleans()),
        flexible_hours=draw(st.booleans()),
        neurodiverse_inclusive=draw(st.booleans())
    )


def expected_matches(jobs: List[Job], text, facets) -> List[Job]:
    needle = text.lower() if text else None
    return [
        job for job in jobs
        if (needle is None or needle in job.title.lower() or needle in job.company_name.lower())
        and all(job.has_facet(facet) for facet in facets)
    ]


@pytest.mark.property
class TestJobSearchProperties:
    """Search returns exactly the catalog jobs satisfying every predicate."""

    async def build_catalog(self, drafts: List[JobDraft]) -> MarketplaceService:
        service = create_service(InMemoryGateway())
        await service.upsert_employer_profile("employer-1", EmployerProfileFields(company_name="Default Co"))
        for draft in drafts:
            await service.post_job("employer-1", draft)
        return service

    @given(
        drafts=st.lists(job_draft_strategy(), min_size=0, max_size=8),
        text=st.one_of(st.none(), st.text(alphabet=WORD_ALPHABET, min_size=1, max_size=3)),
        facets=st.sets(st.sampled_from(list(Facet)))
    )
    @settings(max_examples=60, deadline=5000, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_search_matches_predicates_exactly(self, drafts, text, facets):
        """
        For any catalog and query:
        1. Every result satisfies the text and all facet predicates
        2. Every catalog job satisfying them is returned
        3. Results keep catalog order
        """
        async def run_test():
            service = await self.build_catalog(drafts)
            catalog = await service.list_all_jobs()

            results = await service.search_jobs(text, facets)

            assert [job.id for job in results] == [job.id for job in expected_matches(catalog, text, facets)]

        asyncio.run(run_test())

    @given(drafts=st.lists(job_draft_strategy(), min_size=1, max_size=6))
    @settings(max_examples=30, deadline=5000)
    def test_empty_query_returns_full_catalog(self, drafts):
        async def run_test():
            service = await self.build_catalog(drafts)

            assert await service.search_jobs() == await service.list_all_jobs()
            assert await service.search_jobs("", []) == await service.list_all_jobs()

        asyncio.run(run_test())

    @given(
        drafts=st.lists(job_draft_strategy(), min_size=1, max_size=6),
        text=st.text(alphabet=WORD_ALPHABET, min_size=1, max_size=3)
    )
    @settings(max_examples=30, deadline=5000)
    def test_text_match_ignores_case(self, drafts, text):
        async def run_test():
            service = await self.build_catalog(drafts)

            lower = await service.search_jobs(text.lower())
            upper = await service.search_jobs(text.upper())

            assert [job.id for job in lower] == [job.id for job in upper]

        asyncio.run(run_test())

    @given(
        drafts=st.lists(job_draft_strategy(), min_size=1, max_size=6),
        facets=st.sets(st.sampled_from(list(Facet)), min_size=1)
    )
    @settings(max_examples=30, deadline=5000)
    def test_adding_facets_only_narrows_results(self, drafts, facets):
        async def run_test():
            service = await self.build_catalog(drafts)

            broad = {job.id for job in await service.search_jobs(None, [])}
            narrow = {job.id for job in await service.search_jobs(None, facets)}

            assert narrow <= broad

        asyncio.run(run_test())


class TestJobSearchScenarios:
    """Concrete catalog scenarios."""

    @pytest.fixture
    def service(self):
        return create_service(InMemoryGateway())

    async def post_frontend_job(self, service: MarketplaceService) -> Job:
        await service.upsert_employer_profile("employer-techcorp", {"company_name": "Tech Corp"})
        return await service.post_job(
            "employer-techcorp",
            JobDraft(title="Frontend Developer", location="Remote")
        )

    @pytest.mark.asyncio
    async def test_frontend_job_found_by_text_and_remote_facet(self, service):
        job = await self.post_frontend_job(service)

        results = await service.search_jobs("frontend", [Facet.REMOTE])

        assert [result.id for result in results] == [job.id]

    @pytest.mark.asyncio
    async def test_screen_reader_facet_defaults_false(self, service):
        job = await self.post_frontend_job(service)

        assert job.screen_reader_friendly is False
        assert await service.search_jobs(None, [Facet.SCREEN_READER]) == []

    @pytest.mark.asyncio
    async def test_company_name_matches_text(self, service):
        job = await self.post_frontend_job(service)

        results = await service.search_jobs("TECH corp")

        assert [result.id for result in results] == [job.id]

    @pytest.mark.asyncio
    async def test_unknown_facet_name_is_invalid_argument(self, service):
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.search_jobs("dev", ["wheelchair"])

        assert "remote" in exc_info.value.details["allowed_facets"]

    def test_build_query_accepts_facet_names(self):
        query = build_query("dev", ["remote", Facet.NEURODIVERSE])

        assert query == JobQuery(text="dev", facets={Facet.REMOTE, Facet.NEURODIVERSE})
        assert build_query("", []).is_empty

    @pytest.mark.parametrize("spelling,facet", [
        ("screenReader", Facet.SCREEN_READER),
        ("screen reader", Facet.SCREEN_READER),
        ("flexibleHours", Facet.FLEXIBLE_HOURS),
        ("Neurodiverse", Facet.NEURODIVERSE),
    ])
    def test_facet_spellings_resolve(self, spelling, facet):
        assert Facet(spelling) == facet
        assert build_query(None, [spelling]).facets == {facet}

    @pytest.mark.asyncio
    async def test_camel_case_facet_search(self, service):
        await service.upsert_employer_profile("employer-1", {"company_name": "Acme"})
        job = await service.post_job("employer-1", JobDraft(title="Tester", screen_reader_friendly=True))

        results = await service.search_jobs(None, ["screenReader"])

        assert [result.id for result in results] == [job.id]


class TestPostJob:
    """Listing creation by employers."""

    @pytest.fixture
    def service(self):
        return create_service(InMemoryGateway())

    @pytest.mark.asyncio
    async def test_post_job_stores_listing_for_employer(self, service):
        await service.upsert_employer_profile("employer-1", {"company_name": "Acme"})

        job = await service.post_job(
            "employer-1",
            JobDraft(
                title="  Data Analyst ",
                location="Chennai",
                salary="6 LPA",
                accessibility_tags="Screen Reader, , Flexible Hours",
                screen_reader_friendly=True
            )
        )

        assert job.title == "Data Analyst"
        assert job.employer_id == "employer-1"
        assert job.company_name == "Acme"
        assert job.accessibility_tags == ["Screen Reader", "Flexible Hours"]
        assert job.screen_reader_friendly is True
        assert job.is_remote is False
        assert job.created_at is not None
        assert await service.get_job(job.id) == job
        assert await service.list_employer_jobs("employer-1") == [job]

    @pytest.mark.asyncio
    async def test_is_remote_derived_from_location_when_omitted(self, service):
        await service.upsert_employer_profile("employer-1", {"company_name": "Acme"})

        remote = await service.post_job("employer-1", JobDraft(title="Writer", location="Fully REMOTE"))
        onsite = await service.post_job("employer-1", JobDraft(title="Writer", location="Kochi"))
        explicit = await service.post_job("employer-1", JobDraft(title="Writer", location="Remote", is_remote=False))

        assert remote.is_remote is True
        assert onsite.is_remote is False
        assert explicit.is_remote is False

    @pytest.mark.asyncio
    async def test_draft_company_overrides_profile(self, service):
        await service.upsert_employer_profile("employer-1", {"company_name": "Acme"})

        job = await service.post_job("employer-1", JobDraft(title="Tester", company_name="Acme Labs"))

        assert job.company_name == "Acme Labs"

    @pytest.mark.asyncio
    async def test_blank_title_is_invalid_argument(self, service):
        await service.upsert_employer_profile("employer-1", {"company_name": "Acme"})

        with pytest.raises(InvalidArgumentError):
            await service.post_job("employer-1", JobDraft(title="   "))

        assert await service.list_all_jobs() == []

    @pytest.mark.asyncio
    async def test_missing_employer_identity_is_unauthenticated(self, service):
        with pytest.raises(UnauthenticatedError):
            await service.post_job("", JobDraft(title="Tester"))

    @pytest.mark.asyncio
    async def test_employer_without_profile_is_not_found(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.post_job("ghost", JobDraft(title="Tester"))

        assert exc_info.value.details == {"employer_id": "ghost"}

    @pytest.mark.asyncio
    async def test_get_unknown_job_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.get_job("missing")

    @pytest.mark.asyncio
    async def test_employer_without_jobs_lists_nothing(self, service):
        assert await service.list_employer_jobs("employer-x") == []
