from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Literal, Optional

VISUAL_TYPES = ("image", "chart", "diagram")


class CamelModel(BaseModel):
    """Serializes with the camelCase keys used by the persisted blob and the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Section(CamelModel):
    id: str
    title: str
    level: int = 1
    content: str = ""

    @field_validator("title", "content", mode="before")
    @classmethod
    def default_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("level", mode="before")
    @classmethod
    def coerce_level(cls, value: Any) -> int:
        try:
            return max(1, int(value))
        except (TypeError, ValueError, OverflowError):
            return 1


class Table(CamelModel):
    id: str
    caption: Optional[str] = None
    headers: list[str] = []
    rows: list[list[Any]] = []  # ragged rows are kept as extracted

    @field_validator("headers", mode="before")
    @classmethod
    def stringify_headers(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(h) for h in value]
        return value

    @field_validator("rows", mode="before")
    @classmethod
    def default_rows(cls, value: Any) -> Any:
        return value or []


class Visual(CamelModel):
    id: str
    type: Literal["image", "chart", "diagram"] = "image"
    description: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> str:
        value = str(value or "").strip().lower()
        return value if value in VISUAL_TYPES else "image"

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value: Any) -> str:
        return "" if value is None else str(value)


class PageExtraction(CamelModel):
    """Structured content returned by the extraction model for one page."""

    sections: list[Section] = []
    tables: list[Table] = []
    visuals: list[Visual] = []
    full_text: str = ""


class Document(CamelModel):
    id: str
    file_name: str
    file_size: int
    processed_at: int  # epoch milliseconds
    sections: list[Section] = []
    tables: list[Table] = []
    visuals: list[Visual] = []
    full_text: str = ""


class DocumentSummary(CamelModel):
    id: str
    file_name: str
    file_size: int
    processed_at: int
    section_count: int
    table_count: int
    visual_count: int

    @classmethod
    def from_document(cls, doc: Document) -> "DocumentSummary":
        return cls(
            id=doc.id,
            file_name=doc.file_name,
            file_size=doc.file_size,
            processed_at=doc.processed_at,
            section_count=len(doc.sections),
            table_count=len(doc.tables),
            visual_count=len(doc.visuals),
        )


class UploadedFile(BaseModel):
    """A validated PDF upload handed to the extraction pipeline."""

    name: str
    size: int
    data: bytes = Field(repr=False)
