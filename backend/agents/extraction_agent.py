import logging
from pydantic import BaseModel, Field
from agents.base_agent import BaseAgent
from models.document import PageExtraction, Section, Table, Visual

logger = logging.getLogger("agent.extraction")


class PageRequest(BaseModel):
    doc_id: str
    file_name: str
    page_number: int  # 1-based
    image_base64: str = Field(repr=False)


def element_id(doc_id: str, kind: str, page_number: int, index: int) -> str:
    """Identifier unique across the store: owning document, kind, page, position on page."""
    return f"{doc_id}-{kind}-{page_number}-{index}"


class ExtractionAgent(BaseAgent):
    """Extracts sections, tables, visual descriptions and text from one rendered PDF page."""

    def __init__(self, llm_service):
        super().__init__("extraction", llm_service)

    def get_system_prompt(self) -> str:
        return """You are a document understanding expert analysing one rendered PDF page.
Return a JSON object with:
- sections: Array of objects with: title (string), level (integer, 1 = top-level), content (string)
- tables: Array of objects with: caption (string or null), headers (array of strings), rows (array of arrays of cell values)
- visuals: Array of objects with: type (one of "image", "chart", "diagram"), description (string)
- fullText: The main text content of the page"""

    async def run(self, input_data: PageRequest) -> PageExtraction:
        req = input_data

        prompt = f"""Analyze this PDF page from the document "{req.file_name}" (Page {req.page_number}).

Tasks:
1. Identify the structural hierarchy (Sections/Subsections).
2. Extract any tables accurately into a row/column format.
3. Describe any images, charts, or diagrams in detail for searchability.
4. Provide the main text content.

Return the data in a clean structured format."""

        result = await self.llm.generate_json(
            prompt,
            self.get_system_prompt(),
            image_base64=req.image_base64,
        )
        if not isinstance(result, dict):
            raise ValueError(f"Expected a JSON object for page {req.page_number}, got {type(result).__name__}")

        return self.to_page_extraction(result, req.doc_id, req.page_number)

    @staticmethod
    def to_page_extraction(result: dict, doc_id: str, page_number: int) -> PageExtraction:
        """Attach identifiers to the raw model output, keeping its order."""
        sections = [
            Section.model_validate({"title": "", **s, "id": element_id(doc_id, "sec", page_number, i)})
            for i, s in enumerate(result.get("sections") or [])
        ]
        tables = [
            Table.model_validate({**t, "id": element_id(doc_id, "tab", page_number, i)})
            for i, t in enumerate(result.get("tables") or [])
        ]
        visuals = [
            Visual.model_validate({**v, "id": element_id(doc_id, "vis", page_number, i)})
            for i, v in enumerate(result.get("visuals") or [])
        ]
        return PageExtraction(
            sections=sections,
            tables=tables,
            visuals=visuals,
            full_text=result.get("fullText") or "",
        )
