"""
Tests for migrating old project records.

Flat projects gain sections, section-only projects gain flat content, and
neither loses what it already had.
"""

from datetime import datetime, timezone

import pytest
from folio.core.errors import ValidationError
from folio.core.models import (
    ProjectContent,
    ProjectImage,
    ProjectSection,
    ProjectStatus,
    ProjectType,
    SectionKind,
    SectionMedia,
    UnifiedProject,
)
from folio.services.migration import (
    LegacyProject,
    PortfolioProject,
    migrate_legacy_project,
    migrate_portfolio_project,
    migrate_project,
    migrate_projects,
    to_legacy_project,
)
from folio.services.sync import content_from_sections

CREATED = datetime(2023, 5, 1, tzinfo=timezone.utc)


@pytest.fixture
def legacy():
    return LegacyProject(
        id="proj_1",
        title="Checkout Redesign",
        role="Lead Designer",
        summary="Mobile checkout",
        tags=["ux"],
        type=ProjectType.CASE_STUDY,
        featured=True,
        content=ProjectContent(
            challenge="Abandonment above 70%",
            solution="One-page checkout",
            results="Conversion up 12%",
            technologies=["Figma"],
        ),
        images=[ProjectImage(id="media_1", url="https://cdn.example.com/1.png", alt="Cart")],
        status=ProjectStatus.PUBLISHED,
        created_at=CREATED,
        updated_at=CREATED,
        published_at=CREATED,
    )


@pytest.fixture
def portfolio():
    return PortfolioProject(
        id="proj_2",
        title="Brand System",
        slug="brand-system",
        role="Designer",
        summary="Identity work",
        template_id="case-study-detailed",
        order_index=4,
        sections=[
            ProjectSection(id="solution", kind=SectionKind.TEXT, title="The Solution",
                           content={"text": "A modular logo"}, order=1),
            ProjectSection(id="hero", kind=SectionKind.HERO, title="Hero", order=0, media=[
                SectionMedia(id="media_9", url="https://cdn.example.com/9.png", name="Logo"),
            ]),
        ],
    )


class TestLegacyProjects:
    def test_sections_generated(self, legacy):
        project = migrate_legacy_project(legacy)

        assert [s.id for s in project.sections] == [
            "hero",
            "synced-challenge",
            "synced-solution",
            "synced-gallery",
            "synced-results",
            "synced-technologies",
        ]
        hero = project.sections[0]
        assert hero.content == {
            "title": "Checkout Redesign",
            "subtitle": "Lead Designer",
            "description": "Mobile checkout",
        }

    def test_fields_carried_over(self, legacy):
        project = migrate_legacy_project(legacy)

        assert project.id == "proj_1"
        assert project.slug == "checkout-redesign"
        assert project.template_id is None
        assert project.status == ProjectStatus.PUBLISHED
        assert project.published_at == CREATED
        assert project.content == legacy.content
        assert project.images == legacy.images

    def test_sections_agree_with_content(self, legacy):
        project = migrate_legacy_project(legacy)

        assert content_from_sections(project.sections) == (legacy.content, legacy.images)

    def test_back_to_legacy(self, legacy):
        assert to_legacy_project(migrate_legacy_project(legacy)) == legacy


class TestPortfolioProjects:
    def test_content_extracted_from_sections(self, portfolio):
        project = migrate_portfolio_project(portfolio)

        assert project.content.solution == "A modular logo"
        assert [img.id for img in project.images] == ["media_9"]
        assert project.images[0].alt == "Logo"

    def test_sections_kept_in_order(self, portfolio):
        project = migrate_portfolio_project(portfolio)

        assert [s.id for s in project.sections] == ["hero", "solution"]
        assert project.type == ProjectType.CASE_STUDY
        assert project.template_id == "case-study-detailed"
        assert project.order_index == 4
        assert project.slug == "brand-system"

    def test_input_not_shared(self, portfolio):
        project = migrate_portfolio_project(portfolio)

        project.sections[1].content["text"] = "Changed"

        assert portfolio.sections[0].content["text"] == "A modular logo"


class TestBatch:
    def test_records_are_told_apart(self, legacy, portfolio):
        projects = migrate_projects([legacy.model_dump(), portfolio.model_dump()])

        assert [p.id for p in projects] == ["proj_1", "proj_2"]
        assert projects[0].sections[0].id == "hero"
        assert projects[1].template_id == "case-study-detailed"

    def test_slugs_made_unique(self):
        records = [{"title": "Case Study"}, {"title": "Case Study"}, {"title": "!!!"}]

        projects = migrate_projects(records, taken_slugs=["case-study"])

        assert [p.slug for p in projects] == ["case-study-2", "case-study-3", "project"]

    def test_unparseable_records_reported(self):
        records = [{"title": "Fine"}, {"role": "No title"}, {"title": "Bad", "status": "live"}]

        with pytest.raises(ValidationError) as exc_info:
            migrate_projects(records)

        errors = exc_info.value.errors
        assert any(e.startswith("record 1: title") for e in errors)
        assert any(e.startswith("record 2: status") for e in errors)
        assert not any(e.startswith("record 0") for e in errors)

    def test_single_record(self):
        project = migrate_project({"title": "Solo", "content": {"challenge": "Alone"}})

        assert isinstance(project, UnifiedProject)
        assert project.get_section("synced-challenge").content["text"] == "Alone"
