import json
import logging
from pydantic import BaseModel, ValidationError
from agents.base_agent import BaseAgent
from models.search import CorpusEntry, SearchMatch

logger = logging.getLogger("agent.search")


class RankingRequest(BaseModel):
    query: str
    corpus: list[CorpusEntry]


class SearchAgent(BaseAgent):
    """Asks the model which stored documents best match a query."""

    def __init__(self, llm_service):
        super().__init__("search", llm_service)

    async def run(self, input_data: RankingRequest) -> list[SearchMatch]:
        corpus = json.dumps([c.model_dump(by_alias=True) for c in input_data.corpus])

        system_prompt = """You rank documents in a knowledge base of processed PDF data against a user query.
Return a JSON object with:
- matches: Array of objects with: docId (string, one of the given ids), snippet (string quoted or summarised from the document), reason (short label), relevance (number between 0 and 1)
Order matches from most to least relevant."""

        prompt = f"""Given this user query: "{input_data.query}", find relevant info in these documents: {corpus}. Return top matches with snippets."""

        result = await self.llm.generate_json(prompt, system_prompt)
        return self.to_matches(result)

    @staticmethod
    def to_matches(result) -> list[SearchMatch]:
        """Keep whatever well-formed matches the model returned, in its order."""
        if isinstance(result, dict):
            result = result.get("matches")
        if not isinstance(result, list):
            logger.warning("Ranking response held no match list")
            return []

        matches = []
        for item in result:
            try:
                matches.append(SearchMatch.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Dropping malformed match: {e.errors()[0]['msg']}")
        return matches
