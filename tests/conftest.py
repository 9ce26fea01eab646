import fitz
import pytest
from db.database import create_engine, create_session_factory, init_db
from models.document import Document, Section, Table, Visual
from store.document_store import DocumentStore
from store.slot import StorageSlot


class StubLLM:
    """Answers generate_json calls from a queue of canned responses, then a default."""

    def __init__(self, responses=None, default=None):
        self.responses = list(responses or [])
        self.default = default if default is not None else {"sections": [], "fullText": ""}
        self.calls = []

    async def generate_json(self, prompt, system_instruction="", image_base64=None, **kwargs):
        self.calls.append({"prompt": prompt, "system": system_instruction, "image": image_base64})
        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        return response


class FakeRenderer:
    def __init__(self, pages: int, fail_on: int | None = None):
        self.pages = pages
        self.fail_on = fail_on
        self.rendered = []

    async def page_count(self) -> int:
        return self.pages

    async def render_page_base64(self, page_number: int, scale: float = 2.0) -> str:
        self.rendered.append((page_number, scale))
        if page_number == self.fail_on:
            raise RuntimeError(f"cannot rasterize page {page_number}")
        return f"page-{page_number}"


def make_pdf(pages: int = 1) -> bytes:
    doc = fitz.open()
    for i in range(1, pages + 1):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {i} of the quarterly report")
    data = doc.tobytes()
    doc.close()
    return data


def make_document(doc_id: str = "doc-1", full_text: str = "alpha beta", file_name: str = "report.pdf") -> Document:
    return Document(
        id=doc_id,
        file_name=file_name,
        file_size=2048,
        processed_at=1_700_000_000_000,
        sections=[
            Section(id=f"{doc_id}-sec-1-0", title="Overview", level=1, content="Intro text"),
            Section(id=f"{doc_id}-sec-1-1", title="Details", level=2, content="More text"),
        ],
        tables=[
            Table(
                id=f"{doc_id}-tab-1-0",
                caption="Revenue",
                headers=["Year", "Amount"],
                rows=[[2023, "1.2M"], [2024, 1.5, "estimate"]],
            ),
        ],
        visuals=[Visual(id=f"{doc_id}-vis-1-0", type="chart", description="Bar chart of revenue")],
        full_text=full_text,
    )


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}")
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def slot(session_factory):
    return StorageSlot(session_factory, "test_knowledge_base")


@pytest.fixture
def store(slot):
    return DocumentStore(slot)
