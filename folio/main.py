"""
Folio - Main entry point.

This module walks through the content core end to end and can be run to
verify the installation:

    python -m folio.main
"""

from __future__ import annotations

import asyncio
import logging

from dotenv import load_dotenv

from folio.config import get_settings
from folio.config_loader import load_template_catalog
from folio.core.events import get_event_bus, reset_event_bus
from folio.core.models import (
    CreateProjectData,
    EditorMode,
    ProjectFilters,
    ProjectImage,
    ProjectStatus,
)
from folio.services.editor import ProjectEditor
from folio.services.store import ProjectStore
from folio.storage.local import create_backend

load_dotenv()


async def demo():
    """
    Run a demonstration of the content core.

    Creates a project from a template, edits it in simple mode, switches
    to advanced mode, publishes it and shows where its cover image is used.
    """
    settings = get_settings()

    print("=" * 60)
    print("FOLIO CONTENT CORE DEMO")
    print("=" * 60)
    print()

    reset_event_bus()

    # Templates
    print("Loading templates...")
    catalog = load_template_catalog()
    print(f"  ✓ Loaded {len(catalog)} project templates")
    for template in catalog.list_templates():
        print(f"  • {template.id}: {template.name} ({len(template.sections)} sections)")
    print()

    store = ProjectStore(backend=create_backend(settings), catalog=catalog)
    await store.load()

    # Create
    print("Creating demo project...")
    project = await store.create(CreateProjectData(
        title="Checkout Redesign",
        role="Lead Product Designer",
        summary="Rebuilt a retailer's mobile checkout from the ground up.",
        template_id="case-study-detailed",
        tags=["ux", "ecommerce", "mobile"],
    ))
    print(f"  ✓ Created project: {project.id} ({project.slug})")
    print(f"  ✓ Status: {project.status.value}")
    print(f"  ✓ Sections from template: {len(project.sections)}")
    print()

    # Edit in simple mode, then look at the sections
    print("Editing in simple mode...")
    async with ProjectEditor(store, project) as editor:
        editor.update_content(
            challenge="Mobile checkout abandonment was above 70%.",
            solution="A single-page checkout with saved wallets and address lookup.",
            results="Abandonment fell by 35%. Revenue grew to $1.2M per month.",
            process=["Research", "Prototype", "Usability testing", "Launch"],
            technologies=["Figma", "React Native"],
        )
        editor.add_image(ProjectImage(url="https://cdn.example.com/checkout-hero.png", alt="Checkout hero"))

        editor.switch_mode(EditorMode.ADVANCED)
        print(f"  ✓ Advanced mode: {len(editor.project.sections)} sections")
        for section in editor.project.sections:
            print(f"    {section.order:2d}. [{section.kind.value}] {section.title}")
        print()

        print("Publishing...")
        published = await editor.publish()
        print(f"  ✓ Status: {published.status.value}")
        print(f"  ✓ Published at: {published.published_at.isoformat()}")
        print()

    # Duplicate and query
    copy = await store.duplicate(published.id)
    print(f"Duplicated as: {copy.title} ({copy.slug}) - {copy.status.value}")

    live = await store.list_projects(ProjectFilters(status=ProjectStatus.PUBLISHED))
    print(f"Published projects: {len(live)}")
    print(f"Stats: {await store.stats()}")
    print()

    # Media usage
    cover = published.images[0]
    usage = await store.get_media_usage(cover.id)
    print(f"Media {cover.id} is used in {len(usage)} place(s):")
    for ref in usage:
        where = f"section '{ref.section_title}'" if ref.section_id else "image list"
        print(f"  • {ref.project_title}: {where}")
    print()

    # Event history
    events = get_event_bus().get_history()
    print(f"Event history ({len(events)} events):")
    for event in events[-5:]:
        print(f"  • {event.event_type} {event.project_id}")
    print()

    print("=" * 60)
    print("Demo complete!")
    print("=" * 60)


def main():
    """Main entry point."""
    logging.basicConfig(level=get_settings().log_level)
    asyncio.run(demo())


if __name__ == "__main__":
    main()
