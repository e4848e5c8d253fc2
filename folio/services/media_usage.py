"""
Media-Usage Index - which projects reference a media asset.

Before a shared asset is deleted from the media library, the library
asks this index where the asset is used. The index is derived data: it
is always rebuilt from a snapshot of the whole collection, never patched,
so a reference that was removed from a project cannot linger.
"""

from __future__ import annotations

from folio.core.models import ProjectReference, UnifiedProject


def build_media_usage(projects: list[UnifiedProject]) -> dict[str, list[ProjectReference]]:
    """
    Map every referenced media id to the places that reference it.

    A project's flat image list yields references without a section;
    each section's embedded media yields a reference naming the section.
    """
    usage: dict[str, list[ProjectReference]] = {}

    for project in projects:
        for image in project.images:
            usage.setdefault(image.id, []).append(ProjectReference(
                project_id=project.id,
                project_title=project.title,
            ))

        for section in project.sections:
            for media in section.media:
                usage.setdefault(media.id, []).append(ProjectReference(
                    project_id=project.id,
                    project_title=project.title,
                    section_id=section.id,
                    section_title=section.title,
                ))

    return usage


class MediaUsageIndex:
    """
    Reverse index from media id to referencing projects/sections.

    Owned by the project store, which calls `rebuild` after every
    committed write. Everyone else only reads.
    """

    def __init__(self):
        self._usage: dict[str, list[ProjectReference]] = {}

    def rebuild(self, projects: list[UnifiedProject]) -> None:
        """Replace the whole index with one built from `projects`."""
        self._usage = build_media_usage(projects)

    def get_usage(self, media_id: str) -> list[ProjectReference]:
        """Where `media_id` is used (empty if nowhere)."""
        return [ref.model_copy() for ref in self._usage.get(media_id, [])]

    def is_in_use(self, media_id: str) -> bool:
        return bool(self._usage.get(media_id))

    def projects_using(self, media_id: str) -> list[str]:
        """Distinct project ids referencing `media_id`, in index order."""
        seen: list[str] = []
        for ref in self._usage.get(media_id, []):
            if ref.project_id not in seen:
                seen.append(ref.project_id)
        return seen

    def media_ids(self) -> list[str]:
        """Every media id referenced anywhere."""
        return sorted(self._usage)
