import pytest
from conftest import StubLLM, make_document
from agents.search_agent import SearchAgent
from errors import SearchError
from models.search import LOCAL_SEARCH_REASON
from services.connectivity import ConnectivityMonitor
from services.search_service import SearchDispatcher


def dispatcher(llm, online=True, sample_chars=500):
    return SearchDispatcher(ConnectivityMonitor(online), SearchAgent(llm), sample_chars=sample_chars)


DOCS = [make_document("doc-a", "alpha beta"), make_document("doc-b", "gamma")]


async def test_offline_substring_match_is_case_insensitive():
    llm = StubLLM()
    results = await dispatcher(llm, online=False).search("BETA", DOCS)

    assert [r.doc_id for r in results] == ["doc-a"]
    assert results[0].relevance == 0.5
    assert results[0].reason == LOCAL_SEARCH_REASON
    assert llm.calls == []


async def test_offline_keeps_store_order():
    docs = [make_document("doc-1", "shared term"), make_document("doc-2", "Shared Term again")]
    results = await dispatcher(StubLLM(), online=False).search("shared", docs)
    assert [r.doc_id for r in results] == ["doc-1", "doc-2"]


@pytest.mark.parametrize("online", [True, False])
async def test_empty_collection_returns_nothing(online):
    llm = StubLLM()
    assert await dispatcher(llm, online=online).search("anything", []) == []
    assert llm.calls == []


async def test_online_passes_collaborator_ranking_through():
    llm = StubLLM([{"matches": [
        {"docId": "doc-b", "snippet": "gamma", "relevance": 0.9, "reason": "Exact term"},
        {"docId": "doc-a", "snippet": "alpha", "relevance": 0.95, "reason": "Related"},
    ]}])
    results = await dispatcher(llm).search("greek letters", DOCS)

    assert [(r.doc_id, r.relevance, r.reason) for r in results] == [
        ("doc-b", 0.9, "Exact term"),
        ("doc-a", 0.95, "Related"),
    ]
    assert all(r.reason != LOCAL_SEARCH_REASON for r in results)


async def test_online_sends_bounded_corpus_sample():
    long_doc = make_document("doc-long", "x" * 2000, file_name="long.pdf")
    llm = StubLLM([{"matches": []}])
    await dispatcher(llm, sample_chars=100).search("x", [long_doc])

    prompt = llm.calls[0]["prompt"]
    assert '"id": "doc-long"' in prompt
    assert '"fileName": "long.pdf"' in prompt
    assert "x" * 100 in prompt
    assert "x" * 101 not in prompt


async def test_online_accepts_bare_list():
    llm = StubLLM([[{"docId": "doc-a", "snippet": "s", "relevance": 0.4, "reason": "r"}]])
    results = await dispatcher(llm).search("alpha", DOCS)
    assert [r.doc_id for r in results] == ["doc-a"]


async def test_online_malformed_output_yields_empty_or_partial():
    llm = StubLLM([{"unexpected": True}])
    assert await dispatcher(llm).search("alpha", DOCS) == []

    llm = StubLLM([{"matches": [{"snippet": "no id"}, {"docId": "doc-a", "relevance": 0.7}]}])
    results = await dispatcher(llm).search("alpha", DOCS)
    assert [r.doc_id for r in results] == ["doc-a"]


async def test_online_collaborator_failure_raises():
    llm = StubLLM([RuntimeError("service unavailable")])
    with pytest.raises(SearchError):
        await dispatcher(llm).search("alpha", DOCS)


async def test_mode_follows_connectivity():
    monitor = ConnectivityMonitor(True)
    d = SearchDispatcher(monitor, SearchAgent(StubLLM()))
    assert d.mode == "semantic"
    await monitor.set_online(False)
    assert d.mode == "local"
