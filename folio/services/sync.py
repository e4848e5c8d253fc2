"""
Content Synchronizer - converts between simple content and sections.

A project's flat content (challenge, solution, results, process,
technologies, skills, details) and its image list each map to one
*synchronized* section, identified by a fixed (kind, id) pair:

    challenge     -> text      "synced-challenge"
    solution      -> text      "synced-solution"
    process       -> process   "synced-process"
    images        -> gallery   "synced-gallery"
    results       -> stats     "synced-results"
    technologies  -> features  "synced-technologies"
    skills        -> features  "synced-skills"
    details       -> split     "synced-details"

`sections_from_content` only ever touches those sections. Anything else
in the list (template slots, sections added by hand) is carried through
as-is, so switching from simple to advanced mode never destroys work.

`content_from_sections` is the inverse. For a project that was only ever
edited in simple mode:

    content_from_sections(sections_from_content(c, i, [])) == (c, i)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from folio.core.models import (
    ProjectContent,
    ProjectImage,
    ProjectSection,
    SectionKind,
    SectionLayout,
    SectionMedia,
)
from folio.core.utils import generate_id

DETAIL_FIELDS = ("client", "timeline", "budget", "team", "deliverables", "metrics")


@dataclass(frozen=True)
class SyncedSection:
    """A section the synchronizer owns."""

    key: str  # Which content field(s) it carries
    id: str
    kind: SectionKind
    title: str
    layout: SectionLayout
    content_keys: tuple[str, ...]  # Keys in section.content it manages
    carries_media: bool = False

    @property
    def match_key(self) -> tuple[SectionKind, str]:
        return (self.kind, self.id)


SYNCED_SECTIONS: tuple[SyncedSection, ...] = (
    SyncedSection("challenge", "synced-challenge", SectionKind.TEXT, "The Challenge",
                  SectionLayout.CONTAINED, ("text",)),
    SyncedSection("solution", "synced-solution", SectionKind.TEXT, "The Solution",
                  SectionLayout.CONTAINED, ("text",)),
    SyncedSection("process", "synced-process", SectionKind.PROCESS, "Process",
                  SectionLayout.CONTAINED, ("steps",)),
    SyncedSection("gallery", "synced-gallery", SectionKind.GALLERY, "Project Gallery",
                  SectionLayout.FULL_WIDTH, (), carries_media=True),
    SyncedSection("results", "synced-results", SectionKind.STATS, "Results & Impact",
                  SectionLayout.CONTAINED, ("text", "stats")),
    SyncedSection("technologies", "synced-technologies", SectionKind.FEATURES, "Technologies",
                  SectionLayout.CONTAINED, ("technologies",)),
    SyncedSection("skills", "synced-skills", SectionKind.FEATURES, "Skills",
                  SectionLayout.CONTAINED, ("skills",)),
    SyncedSection("details", "synced-details", SectionKind.SPLIT, "Project Details",
                  SectionLayout.SPLIT_RIGHT, DETAIL_FIELDS),
)

SYNCED_IDS = frozenset(entry.id for entry in SYNCED_SECTIONS)


def is_synced_section(section: ProjectSection) -> bool:
    """Whether a section is owned by the synchronizer."""
    return any(section.kind == entry.kind and section.id == entry.id for entry in SYNCED_SECTIONS)


# =============================================================================
# Simple -> Advanced
# =============================================================================


def sections_from_content(
    content: ProjectContent,
    images: list[ProjectImage],
    existing_sections: list[ProjectSection],
) -> list[ProjectSection]:
    """
    Produce the section list representing `content` and `images`.

    Synchronized sections already in `existing_sections` are updated in
    place (their position, layout and any extra content keys are kept);
    missing ones are appended when their field has data. When a field is
    now empty only the keys (or media) it manages are cleared; the section
    itself goes away only if nothing else is left in it. All other
    sections are kept. The input list is not modified.

    Template slots are never filled: a project seeded from a template with
    an empty "solution" slot gets a separate "synced-solution" section
    once the solution is written in simple mode.
    """
    result = [s.model_copy(deep=True) for s in sorted(existing_sections, key=lambda s: s.order)]

    positions: dict[tuple[SectionKind, str], int] = {}
    for i, section in enumerate(result):
        positions.setdefault((section.kind, section.id), i)

    dropped: set[int] = set()
    for entry in SYNCED_SECTIONS:
        payload, media = _build_payload(entry, content, images)
        empty = not payload and not media
        pos = positions.get(entry.match_key)

        if pos is not None:
            section = result[pos]
            for key in entry.content_keys:
                section.content.pop(key, None)
            section.content.update(payload)
            if entry.carries_media:
                section.media = media
            if empty and not section.content and not section.media:
                dropped.add(pos)
        elif not empty:
            result.append(ProjectSection(
                id=entry.id,
                kind=entry.kind,
                title=entry.title,
                content=payload,
                media=media,
                layout=entry.layout,
            ))

    kept = [s for i, s in enumerate(result) if i not in dropped]
    for order, section in enumerate(kept):
        section.order = order
    return kept


def _build_payload(
    entry: SyncedSection,
    content: ProjectContent,
    images: list[ProjectImage],
) -> tuple[dict[str, Any], list[SectionMedia]]:
    """Section content and media for one synchronized section."""
    if entry.key in ("challenge", "solution"):
        text = getattr(content, entry.key)
        return ({"text": text} if text else {}), []

    if entry.key == "results":
        if not content.results:
            return {}, []
        return {"text": content.results, "stats": parse_results_to_stats(content.results)}, []

    if entry.key == "process":
        return ({"steps": list(content.process)} if content.process else {}), []

    if entry.key in ("technologies", "skills"):
        values = getattr(content, entry.key)
        return ({entry.key: list(values)} if values else {}), []

    if entry.key == "gallery":
        return {}, [image_to_media(img) for img in images]

    if entry.key == "details":
        details: dict[str, Any] = {}
        for name in DETAIL_FIELDS:
            value = getattr(content, name)
            if value:
                details[name] = list(value) if isinstance(value, list) else value
        return details, []

    raise ValueError(f"Unknown synchronized section: {entry.key}")


def image_to_media(image: ProjectImage) -> SectionMedia:
    """Embed a flat-list image in a section."""
    return SectionMedia(
        id=image.id,
        url=image.url,
        name=image.alt,
        alt=image.alt,
        caption=image.caption,
        type=image.type,
        order=image.order,
    )


_PERCENT = re.compile(r"(\d+)%")
_DOLLAR = re.compile(r"\$([0-9.,]+[KMB]?\+?)")
_NUMBER = re.compile(r"(\d+[\d.,]*[KMB]?\+?)\s+(\w+)")


def parse_results_to_stats(results: str) -> list[dict[str, str]]:
    """
    Pull headline numbers out of a results paragraph (best effort).

    "Cut load time by 40%. Grew revenue to $2M+." ->
        [{"value": "40%", ...}, {"value": "$2M+", ...}]
    """
    stats = []
    for sentence in (s.strip() for s in results.split(".")):
        if not sentence:
            continue
        if match := _PERCENT.search(sentence):
            stats.append({"value": match.group(0), "label": sentence[:40]})
        elif match := _DOLLAR.search(sentence):
            stats.append({"value": match.group(0), "label": sentence[:40]})
        elif match := _NUMBER.search(sentence):
            stats.append({"value": match.group(1), "label": match.group(2)})
    return stats


# =============================================================================
# Advanced -> Simple
# =============================================================================


def content_from_sections(
    sections: list[ProjectSection],
) -> tuple[ProjectContent, list[ProjectImage]]:
    """
    Extract flat content and the image list from sections.

    Each field comes from its synchronized section when there is one,
    otherwise from the first section that looks like it carries that
    field (by id/title or content key). Images are gathered from every
    section's media, in section order then media order. A media id already
    taken from an earlier section is skipped; repeats within one section
    are kept.
    """
    ordered = sorted(sections, key=lambda s: s.order)
    synced: dict[tuple[SectionKind, str], ProjectSection] = {}
    for section in ordered:
        synced.setdefault((section.kind, section.id), section)

    def owned(key: str) -> ProjectSection | None:
        entry = next(s for s in SYNCED_SECTIONS if s.key == key)
        return synced.get(entry.match_key)

    def named_text(*needles: str) -> str:
        for section in ordered:
            text = section.content.get("text")
            if not isinstance(text, str) or section.id in SYNCED_IDS:
                continue
            label = f"{section.id} {section.title}".lower()
            if any(needle in label for needle in needles):
                return text
        return ""

    def with_key(key: str) -> Any:
        for section in ordered:
            if key in section.content and section.id not in SYNCED_IDS:
                return section.content[key]
        return None

    data: dict[str, Any] = {}

    for key, needles in (("challenge", ("challenge",)),
                         ("solution", ("solution",)),
                         ("results", ("result", "impact"))):
        section = owned(key)
        data[key] = section.content.get("text", "") if section else named_text(*needles)

    section = owned("process")
    if section:
        data["process"] = list(section.content.get("steps", []))
    else:
        process = next(
            (
                s for s in ordered
                if s.kind == SectionKind.PROCESS and isinstance(s.content.get("steps"), list)
            ),
            None,
        )
        data["process"] = list(process.content["steps"]) if process else []

    for key in ("technologies", "skills"):
        section = owned(key)
        values = section.content.get(key, []) if section else with_key(key)
        data[key] = list(values) if isinstance(values, list) else []

    details = owned("details")
    for name in DETAIL_FIELDS:
        value = details.content.get(name) if details and name in details.content else with_key(name)
        if value is not None:
            data[name] = value

    content = ProjectContent.model_validate(data)

    images: list[ProjectImage] = []
    seen: set[str] = set()
    for section in ordered:
        for media in section.media:
            if media.id in seen:
                continue
            images.append(ProjectImage(
                id=media.id,
                url=media.url,
                alt=media.alt or media.name,
                caption=media.caption,
                type=media.type,
                order=media.order if media.order is not None else len(images),
            ))
        seen.update(m.id for m in section.media)

    return content, images


# =============================================================================
# Section list editing
# =============================================================================

_DEFAULT_TITLES: dict[SectionKind, str] = {
    SectionKind.HERO: "Hero Section",
    SectionKind.TEXT: "Text Section",
    SectionKind.IMAGE: "Image",
    SectionKind.VIDEO: "Video",
    SectionKind.GALLERY: "Gallery",
    SectionKind.GRID: "Grid",
    SectionKind.SPLIT: "Split Section",
    SectionKind.STATS: "Statistics",
    SectionKind.TESTIMONIAL: "Testimonial",
    SectionKind.CTA: "Call to Action",
    SectionKind.TIMELINE: "Timeline",
    SectionKind.PROCESS: "Process",
    SectionKind.FEATURES: "Features",
    SectionKind.CODE: "Code",
    SectionKind.QUOTE: "Quote",
}

_FULL_WIDTH_KINDS = {SectionKind.HERO, SectionKind.GALLERY, SectionKind.VIDEO, SectionKind.CTA}


def default_section_content(kind: SectionKind) -> dict[str, Any]:
    """Empty content skeleton for a new section of `kind`."""
    if kind == SectionKind.TEXT:
        return {"text": ""}
    if kind == SectionKind.PROCESS:
        return {"steps": []}
    if kind == SectionKind.STATS:
        return {"stats": []}
    if kind == SectionKind.FEATURES:
        return {"features": []}
    if kind == SectionKind.QUOTE:
        return {"quote": "", "author": ""}
    return {}


def _renumbered(sections: list[ProjectSection]) -> list[ProjectSection]:
    return [s.model_copy(deep=True, update={"order": i}) for i, s in enumerate(sections)]


def add_section(
    sections: list[ProjectSection],
    kind: SectionKind,
    title: str | None = None,
) -> list[ProjectSection]:
    """Append a new empty section of `kind`."""
    section = ProjectSection(
        id=generate_id(kind.value),
        kind=kind,
        title=title or _DEFAULT_TITLES.get(kind, "New Section"),
        content=default_section_content(kind),
        layout=SectionLayout.FULL_WIDTH if kind in _FULL_WIDTH_KINDS else SectionLayout.CONTAINED,
    )
    return _renumbered([*sections, section])


def remove_section(sections: list[ProjectSection], section_id: str) -> list[ProjectSection]:
    """Remove a section by ID."""
    return _renumbered([s for s in sections if s.id != section_id])


def reorder_sections(
    sections: list[ProjectSection],
    from_index: int,
    to_index: int,
) -> list[ProjectSection]:
    """Move the section at `from_index` to `to_index`."""
    result = list(sections)
    if 0 <= from_index < len(result):
        moved = result.pop(from_index)
        result.insert(to_index, moved)
    return _renumbered(result)


def duplicate_section(sections: list[ProjectSection], section_id: str) -> list[ProjectSection]:
    """Append a deep copy of a section under a new ID."""
    original = next((s for s in sections if s.id == section_id), None)
    if original is None:
        return [s.model_copy(deep=True) for s in sections]

    copy = original.model_copy(deep=True, update={"id": generate_id(original.kind.value)})
    return _renumbered([*sections, copy])
