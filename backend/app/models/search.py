# app/models/search.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict, Any, Optional

DEFAULT_MAX_RESULTS = 10
MAX_RESULTS_CAP = 100


class SearchRequest(BaseModel):
    """Body accepted by both search endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    model: str = ""
    fields: List[str] = Field(default_factory=list)
    query_text: str = Field("", alias="queryText")
    max_results: Optional[int] = Field(None, alias="maxResults")
    fuzzy: bool = False

    def clamped_max_results(self) -> int:
        """maxResults clamped to (0, 100]; anything outside falls back to 10."""
        if self.max_results is None or self.max_results <= 0 or self.max_results > MAX_RESULTS_CAP:
            return DEFAULT_MAX_RESULTS
        return self.max_results


class SearchQuery(BaseModel):
    """A parameterized statement ready for asyncpg."""

    sql: str
    args: List[Any] = []


class SearchResponse(BaseModel):
    results: List[Dict[str, Any]] = []
    count: int = 0
