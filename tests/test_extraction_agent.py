from conftest import StubLLM
from agents.base_agent import AgentStatus
from agents.extraction_agent import ExtractionAgent, PageRequest


def page_request(page_number=2):
    return PageRequest(doc_id="doc-9", file_name="manual.pdf", page_number=page_number, image_base64="aW1n")


async def test_assigns_ids_from_kind_page_and_position():
    llm = StubLLM([{
        "sections": [
            {"title": "Setup", "level": 1, "content": "Unpack the device."},
            {"title": "Wiring", "level": 2, "content": "Connect the cables."},
        ],
        "tables": [{"caption": "Specs", "headers": ["Pin", "Volts"], "rows": [[1, 5], [2]]}],
        "visuals": [{"type": "diagram", "description": "Wiring diagram"}],
        "fullText": "Setup. Wiring.",
    }])
    result = await ExtractionAgent(llm).run(page_request())

    assert [s.id for s in result.sections] == ["doc-9-sec-2-0", "doc-9-sec-2-1"]
    assert [s.title for s in result.sections] == ["Setup", "Wiring"]
    assert result.tables[0].id == "doc-9-tab-2-0"
    assert result.tables[0].rows == [[1, 5], [2]]
    assert result.visuals[0].id == "doc-9-vis-2-0"
    assert result.full_text == "Setup. Wiring."


async def test_prompt_names_file_and_page_and_sends_image():
    llm = StubLLM()
    await ExtractionAgent(llm).run(page_request(page_number=3))

    call = llm.calls[0]
    assert '"manual.pdf" (Page 3)' in call["prompt"]
    assert call["image"] == "aW1n"


async def test_absent_fields_default_to_empty():
    llm = StubLLM([{}])
    result = await ExtractionAgent(llm).run(page_request())

    assert result.sections == []
    assert result.tables == []
    assert result.visuals == []
    assert result.full_text == ""


async def test_lenient_field_values():
    llm = StubLLM([{
        "sections": [{"title": "Intro", "level": "not a number", "content": None}],
        "tables": [{"headers": [2023, 2024], "rows": None}],
        "visuals": [{"type": "Photograph", "description": "A team photo"}],
        "fullText": None,
    }])
    result = await ExtractionAgent(llm).run(page_request())

    assert result.sections[0].level == 1
    assert result.sections[0].content == ""
    assert result.tables[0].headers == ["2023", "2024"]
    assert result.tables[0].rows == []
    assert result.tables[0].caption is None
    assert result.visuals[0].type == "image"
    assert result.full_text == ""


async def test_non_object_response_fails_execution():
    llm = StubLLM([["not", "an", "object"]])
    result = await ExtractionAgent(llm).execute(page_request())

    assert result.status == AgentStatus.FAILED
    assert "Expected a JSON object" in result.error


async def test_llm_error_fails_execution_without_retry():
    llm = StubLLM([RuntimeError("quota exceeded")])
    result = await ExtractionAgent(llm).execute(page_request())

    assert result.status == AgentStatus.FAILED
    assert len(llm.calls) == 1
