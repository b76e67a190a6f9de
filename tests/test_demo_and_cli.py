"""Tests for the demo marketplace and the command-line interface."""

import pytest
from typer.testing import CliRunner

from inclusive_hiring import __version__
from inclusive_hiring.cli import app
from inclusive_hiring.core.models import Facet
from inclusive_hiring.demo.scenarios import DemoDataGenerator, seed_demo_data
from inclusive_hiring.service import create_service
from inclusive_hiring.storage.memory import InMemoryGateway
from inclusive_hiring.utils.logging import configure_logging

runner = CliRunner()


class TestDemoData:
    """The demo marketplace loads through the public operations."""

    @pytest.fixture
    def service(self):
        return create_service(InMemoryGateway())

    @pytest.mark.asyncio
    async def test_seed_creates_every_demo_record(self, service):
        generator = DemoDataGenerator()

        created = await seed_demo_data(service)

        assert created == {
            "employers": len(generator.get_employers()),
            "jobs": sum(len(employer.listings) for employer in generator.get_employers()),
            "candidates": len(generator.get_candidates()),
            "courses": len(generator.get_courses()),
        }
        assert len(await service.list_all_jobs()) == created["jobs"]

    @pytest.mark.asyncio
    async def test_demo_catalog_supports_facet_search(self, service):
        await seed_demo_data(service)

        remote = await service.search_jobs("frontend", [Facet.REMOTE])
        screen_reader = await service.search_jobs(None, [Facet.SCREEN_READER])

        assert [job.title for job in remote] == ["Frontend Developer"]
        assert [job.company_name for job in remote] == ["Tech Corp"]
        assert [job.title for job in screen_reader] == ["QA Engineer"]

    @pytest.mark.asyncio
    async def test_demo_candidate_can_apply(self, service):
        await seed_demo_data(service)
        job = (await service.search_jobs("UX"))[0]

        application = await service.apply_to_job("candidate-jane", job.id)

        assert application.company_name == "Designify"


class TestCLI:
    """typer commands."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config(self):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "Gateway Timeout" in result.output

    def test_search_with_facet(self):
        result = runner.invoke(app, ["search", "frontend", "--facet", "remote"])

        assert result.exit_code == 0
        assert "1 matching job(s)" in result.output
        assert "Frontend" in result.output

    def test_search_rejects_unknown_facet(self):
        result = runner.invoke(app, ["search", "-f", "wheelchair"])

        assert result.exit_code != 0

    def test_seed(self):
        result = runner.invoke(app, ["seed"])

        assert result.exit_code == 0
        assert "Demo Catalog" in result.output
        assert "courses" in result.output

    def test_repeated_invocations_with_logging_configured(self):
        configure_logging()

        results = [
            runner.invoke(app, ["search", "designer"]),
            runner.invoke(app, ["seed"]),
            runner.invoke(app, ["seed"]),
        ]

        assert [result.exit_code for result in results] == [0, 0, 0]
        assert all(result.exception is None for result in results)
