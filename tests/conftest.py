import base64
import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import zine_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from zine_toolkit.core.errors import PersistenceError  # noqa: E402
from zine_toolkit.editor.session import EditorSession  # noqa: E402
from zine_toolkit.store import InMemoryRepository  # noqa: E402


def _png_data_uri(size=(200, 100), color="red") -> str:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


class FlakyRepository(InMemoryRepository):
    """In-memory repository whose writes can be made to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_updates = False
        self.fail_inserts_after = None

    async def update_element(self, element_id, **changes):
        if self.fail_updates:
            raise PersistenceError("backend unavailable")
        return await super().update_element(element_id, **changes)

    async def insert_element(self, draft):
        if self.fail_inserts_after is not None:
            if self.fail_inserts_after <= 0:
                raise PersistenceError("backend unavailable")
            self.fail_inserts_after -= 1
        return await super().insert_element(draft)


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def make_image_uri():
    """Factory for PNG data URIs of a solid colour."""
    return _png_data_uri


@pytest.fixture
def image_uri():
    return _png_data_uri()


@pytest.fixture
def broken_image_uri():
    return "data:image/png;base64," + base64.b64encode(b"not an image").decode("ascii")


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def flaky_repository():
    return FlakyRepository()


@pytest.fixture
def make_session():
    """Factory: open a fresh document and return its session at zoom 1.0."""
    async def _make(repo=None, **kwargs):
        repo = repo or InMemoryRepository()
        document = await repo.insert_document("Test zine")
        session = EditorSession(repo, **kwargs)
        await session.open(document.id)
        session.zoom.set_scale(1.0)
        return session
    return _make
