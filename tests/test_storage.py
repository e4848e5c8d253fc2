"""Tests for project persistence backends."""

import pytest
from folio.config import Settings
from folio.config_loader import DEFAULT_TEMPLATES_DIR, load_template_catalog
from folio.core.errors import StorageError
from folio.core.events import EventBus
from folio.core.models import (
    CreateProjectData,
    ProjectContent,
    ProjectImage,
    ProjectUpdate,
    UnifiedProject,
)
from folio.services.store import ProjectStore
from folio.storage.local import (
    InMemoryProjectBackend,
    JsonFileProjectBackend,
    create_backend,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def project():
    return UnifiedProject(
        title="Checkout",
        role="Designer",
        summary="Mobile checkout",
        slug="checkout",
        content=ProjectContent(challenge="Slow", client="Acme"),
        images=[ProjectImage(url="https://cdn.example.com/a.png", alt="A")],
    )


@pytest.fixture
def json_path(tmp_path):
    return tmp_path / "data" / "projects.json"


# =============================================================================
# Backends
# =============================================================================


class TestInMemoryBackend:
    @pytest.mark.asyncio
    async def test_snapshot_is_detached(self, project):
        backend = InMemoryProjectBackend()
        await backend.save([project])

        project.title = "Changed after save"
        loaded = await backend.load()

        assert loaded[0].title == "Checkout"
        assert backend.save_count == 1

    @pytest.mark.asyncio
    async def test_seeded(self, project):
        backend = InMemoryProjectBackend([project])

        assert await backend.load() == [project]


class TestJsonFileBackend:
    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, json_path):
        assert await JsonFileProjectBackend(json_path).load() == []

    @pytest.mark.asyncio
    async def test_round_trip(self, json_path, project):
        backend = JsonFileProjectBackend(json_path)

        await backend.save([project])

        assert json_path.exists()
        assert await backend.load() == [project]
        assert [p.name for p in json_path.parent.iterdir()] == ["projects.json"]

    @pytest.mark.asyncio
    async def test_corrupt_file(self, json_path):
        json_path.parent.mkdir(parents=True)
        json_path.write_text("{not json")

        with pytest.raises(StorageError):
            await JsonFileProjectBackend(json_path).load()


class TestCreateBackend:
    def test_memory_by_default(self):
        assert isinstance(create_backend(Settings(storage_backend="memory")), InMemoryProjectBackend)

    def test_json(self, tmp_path):
        backend = create_backend(Settings(storage_backend="json", data_dir=str(tmp_path)))

        assert isinstance(backend, JsonFileProjectBackend)
        assert backend.path == tmp_path / "projects.json"


class TestStoreOnDisk:
    @pytest.mark.asyncio
    async def test_projects_survive_restart(self, json_path):
        catalog = load_template_catalog(DEFAULT_TEMPLATES_DIR)
        store = ProjectStore(JsonFileProjectBackend(json_path), catalog, EventBus())

        created = await store.create(CreateProjectData(
            title="On Disk", role="Engineer", summary="Persisted", template_id="experiment-log",
        ))
        await store.update(created.id, ProjectUpdate(tags=["rust"]))

        reopened = ProjectStore(JsonFileProjectBackend(json_path), catalog, EventBus())
        loaded = await reopened.get(created.id)

        assert loaded.tags == ["rust"]
        assert loaded.sections == created.sections
        assert loaded.created_at == created.created_at
