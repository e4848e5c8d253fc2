"""
Tests for the content synchronizer.

Core principle: simple-mode content survives a trip through sections,
and sections the synchronizer did not create are never touched.
"""

import pytest
from folio.core.models import (
    MediaType,
    ProjectContent,
    ProjectImage,
    ProjectSection,
    SectionKind,
    SectionLayout,
    SectionMedia,
)
from folio.services.sync import (
    add_section,
    content_from_sections,
    duplicate_section,
    is_synced_section,
    parse_results_to_stats,
    remove_section,
    reorder_sections,
    sections_from_content,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def content():
    """Fully populated simple-mode content."""
    return ProjectContent(
        challenge="Checkout abandonment was above 70%.",
        solution="A single-page checkout.",
        results="Abandonment fell by 35%. Revenue grew to $2M+.",
        process=["Research", "Prototype", "Test"],
        technologies=["Figma", "React Native"],
        skills=["Interaction design"],
        client="Acme",
        timeline="3 months",
        team=["Ana", "Ben"],
        deliverables=["Prototype"],
    )


@pytest.fixture
def images():
    return [
        ProjectImage(id="media_a", url="https://cdn.example.com/a.png", alt="Hero", caption="Before", order=0),
        ProjectImage(id="media_b", url="https://cdn.example.com/b.mp4", type=MediaType.VIDEO, order=1),
    ]


@pytest.fixture
def custom_section():
    """A hand-added section the synchronizer does not own."""
    return ProjectSection(
        id="intro",
        kind=SectionKind.TEXT,
        title="Introduction",
        content={"text": "Hello"},
        order=0,
    )


# =============================================================================
# Round trip
# =============================================================================


class TestRoundTrip:
    def test_full_content(self, content, images):
        sections = sections_from_content(content, images, [])

        assert content_from_sections(sections) == (content, images)

    def test_empty_content(self):
        sections = sections_from_content(ProjectContent(), [], [])

        assert sections == []
        assert content_from_sections(sections) == (ProjectContent(), [])

    def test_partial_content(self):
        content = ProjectContent(challenge="Only a challenge", skills=["Research"])

        assert content_from_sections(sections_from_content(content, [], [])) == (content, [])

    def test_image_without_alt(self):
        images = [ProjectImage(id="media_x", url="https://cdn.example.com/x.png")]

        _, extracted = content_from_sections(sections_from_content(ProjectContent(), images, []))

        assert extracted == images

    def test_repeated_image_id(self):
        images = [
            ProjectImage(id="a", url="https://cdn.example.com/u1.png"),
            ProjectImage(id="a", url="https://cdn.example.com/u2.png", order=1),
        ]

        _, extracted = content_from_sections(sections_from_content(ProjectContent(), images, []))

        assert extracted == images


# =============================================================================
# Simple -> sections
# =============================================================================


class TestSectionsFromContent:
    def test_generated_sections(self, content, images):
        sections = sections_from_content(content, images, [])

        assert [s.id for s in sections] == [
            "synced-challenge",
            "synced-solution",
            "synced-process",
            "synced-gallery",
            "synced-results",
            "synced-technologies",
            "synced-skills",
            "synced-details",
        ]
        assert [s.order for s in sections] == list(range(8))
        assert all(is_synced_section(s) for s in sections)

        gallery = sections[3]
        assert gallery.kind == SectionKind.GALLERY
        assert [m.id for m in gallery.media] == ["media_a", "media_b"]

        details = sections[7]
        assert details.content == {
            "client": "Acme",
            "timeline": "3 months",
            "team": ["Ana", "Ben"],
            "deliverables": ["Prototype"],
        }

    def test_results_carry_stats(self, content):
        sections = sections_from_content(content, [], [])
        results = next(s for s in sections if s.id == "synced-results")

        assert results.kind == SectionKind.STATS
        assert [stat["value"] for stat in results.content["stats"]] == ["35%", "$2M+"]

    def test_custom_sections_preserved(self, custom_section):
        content = ProjectContent(challenge="New challenge")

        sections = sections_from_content(content, [], [custom_section])

        assert sections[0] == custom_section
        assert sections[1].id == "synced-challenge"

    def test_existing_synced_section_updated_in_place(self, custom_section):
        existing = [
            ProjectSection(
                id="synced-challenge",
                kind=SectionKind.TEXT,
                title="What went wrong",
                content={"text": "Old", "subtitle": "Kept"},
                layout=SectionLayout.FULL_WIDTH,
                order=0,
            ),
            custom_section.model_copy(update={"order": 1}),
        ]

        sections = sections_from_content(
            ProjectContent(challenge="New", solution="Fix"), [], existing,
        )

        assert [s.id for s in sections] == ["synced-challenge", "intro", "synced-solution"]
        challenge = sections[0]
        assert challenge.title == "What went wrong"
        assert challenge.layout == SectionLayout.FULL_WIDTH
        assert challenge.content == {"subtitle": "Kept", "text": "New"}

    def test_emptied_field_drops_its_section(self, custom_section):
        first = sections_from_content(ProjectContent(challenge="Something"), [], [custom_section])

        second = sections_from_content(ProjectContent(), [], first)

        assert [s.id for s in second] == ["intro"]

    def test_emptied_field_keeps_advanced_additions(self):
        first = sections_from_content(ProjectContent(challenge="Old"), [], [])
        first[0].media.append(SectionMedia(id="m1", url="https://cdn.example.com/m1.png"))
        first[0].content["caption"] = "Before the redesign"

        second = sections_from_content(ProjectContent(), [], first)

        assert [s.id for s in second] == ["synced-challenge"]
        assert second[0].content == {"caption": "Before the redesign"}
        assert [m.id for m in second[0].media] == ["m1"]
        assert content_from_sections(second)[0].challenge == ""

    def test_emptied_gallery_clears_media_only(self, images):
        first = sections_from_content(ProjectContent(), images, [])
        first[0].content["columns"] = 3

        second = sections_from_content(ProjectContent(), [], first)

        assert second[0].id == "synced-gallery"
        assert second[0].media == []
        assert second[0].content == {"columns": 3}

    def test_input_not_mutated(self, custom_section):
        existing = sections_from_content(ProjectContent(challenge="Before"), [], [custom_section])
        snapshot = [s.model_copy(deep=True) for s in existing]

        sections_from_content(ProjectContent(challenge="After"), [], existing)

        assert existing == snapshot

    def test_same_id_different_kind_not_touched(self):
        lookalike = ProjectSection(id="synced-challenge", kind=SectionKind.QUOTE, content={"quote": "Q"})

        sections = sections_from_content(ProjectContent(challenge="C"), [], [lookalike])

        assert sections[0].content == {"quote": "Q"}
        assert sections[1].kind == SectionKind.TEXT


# =============================================================================
# Sections -> simple
# =============================================================================


class TestContentFromSections:
    def test_template_sections_fall_back_by_name(self):
        sections = [
            ProjectSection(id="challenge", kind=SectionKind.SPLIT, title="The Challenge", order=0),
            ProjectSection(id="solution", kind=SectionKind.TEXT, title="The Solution",
                           content={"text": "Built it"}, order=1),
            ProjectSection(id="process", kind=SectionKind.PROCESS, title="Design Process",
                           content={"steps": ["Sketch", "Ship"]}, order=2),
            ProjectSection(id="outcome", kind=SectionKind.STATS, title="Impact",
                           content={"text": "Up 20%"}, order=3),
        ]

        content, images = content_from_sections(sections)

        assert content.challenge == ""
        assert content.solution == "Built it"
        assert content.process == ["Sketch", "Ship"]
        assert content.results == "Up 20%"
        assert images == []

    def test_synced_section_wins(self):
        sections = [
            ProjectSection(id="solution", kind=SectionKind.TEXT, title="Solution",
                           content={"text": "From template"}, order=0),
            ProjectSection(id="synced-solution", kind=SectionKind.TEXT, title="The Solution",
                           content={"text": "From simple mode"}, order=1),
        ]

        content, _ = content_from_sections(sections)

        assert content.solution == "From simple mode"

    def test_images_collected_in_section_order_once(self):
        shared = SectionMedia(id="media_1", url="https://cdn.example.com/1.png", name="One")
        sections = [
            ProjectSection(id="b", kind=SectionKind.GALLERY, order=1, media=[
                SectionMedia(id="media_2", url="https://cdn.example.com/2.png"),
                shared,
            ]),
            ProjectSection(id="a", kind=SectionKind.IMAGE, order=0, media=[shared]),
        ]

        _, images = content_from_sections(sections)

        assert [img.id for img in images] == ["media_1", "media_2"]
        assert images[0].alt == "One"
        assert [img.order for img in images] == [0, 1]

    def test_non_list_values_ignored(self):
        sections = [ProjectSection(kind=SectionKind.FEATURES, content={"technologies": "React"})]

        content, _ = content_from_sections(sections)

        assert content.technologies == []


class TestResultsParsing:
    def test_headline_numbers(self):
        stats = parse_results_to_stats("Cut load time by 40%. Grew revenue to $2M+. Shipped 12 features")

        assert [s["value"] for s in stats] == ["40%", "$2M+", "12"]
        assert stats[2]["label"] == "features"

    def test_no_numbers(self):
        assert parse_results_to_stats("Everyone was happy.") == []


# =============================================================================
# Section list editing
# =============================================================================


class TestSectionHelpers:
    @pytest.fixture
    def sections(self):
        return [
            ProjectSection(id="a", kind=SectionKind.TEXT, order=0),
            ProjectSection(id="b", kind=SectionKind.TEXT, order=1),
            ProjectSection(id="c", kind=SectionKind.TEXT, order=2),
        ]

    def test_add_section(self, sections):
        result = add_section(sections, SectionKind.QUOTE)

        added = result[-1]
        assert added.kind == SectionKind.QUOTE
        assert added.title == "Quote"
        assert added.content == {"quote": "", "author": ""}
        assert [s.order for s in result] == [0, 1, 2, 3]
        assert len(sections) == 3

    def test_add_section_with_title(self, sections):
        result = add_section(sections, SectionKind.GALLERY, "Screens")

        assert result[-1].title == "Screens"
        assert result[-1].layout == SectionLayout.FULL_WIDTH

    def test_remove_section(self, sections):
        result = remove_section(sections, "b")

        assert [(s.id, s.order) for s in result] == [("a", 0), ("c", 1)]

    def test_reorder_sections(self, sections):
        result = reorder_sections(sections, 0, 2)

        assert [(s.id, s.order) for s in result] == [("b", 0), ("c", 1), ("a", 2)]

    def test_reorder_out_of_range(self, sections):
        result = reorder_sections(sections, 5, 0)

        assert [s.id for s in result] == ["a", "b", "c"]

    def test_duplicate_section(self, sections):
        sections[1].content["text"] = "Body"

        result = duplicate_section(sections, "b")

        copy = result[-1]
        assert copy.id != "b"
        assert copy.content == {"text": "Body"}
        assert copy.order == 3
        copy.content["text"] = "Changed"
        assert sections[1].content["text"] == "Body"

    def test_results_do_not_share_state_with_input(self, sections):
        sections[0].content["text"] = "Original"
        sections[0].media.append(SectionMedia(id="m1", url="https://cdn.example.com/m1.png"))

        results = [
            add_section(sections, SectionKind.TEXT),
            remove_section(sections, "b"),
            reorder_sections(sections, 2, 0),
            duplicate_section(sections, "b"),
            duplicate_section(sections, "missing"),
        ]
        for result in results:
            first = next(s for s in result if s.id == "a")
            first.content["text"] = "Mutated"
            first.media.clear()

        assert sections[0].content == {"text": "Original"}
        assert [m.id for m in sections[0].media] == ["m1"]
