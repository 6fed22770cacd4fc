"""
Semantic search endpoint.
"""
from fastapi import APIRouter, Depends

from readstack.core import RequestContext, semantic_search
from readstack.schemas.reading import ReadingResponse
from readstack.schemas.search import SearchRequest, SearchResult, SearchResponse
from readstack.api.deps import get_context

router = APIRouter()


@router.post("", response_model=SearchResponse)
async def search_readings(
    search_data: SearchRequest,
    ctx: RequestContext = Depends(get_context),
):
    """Find saved articles by meaning rather than keywords."""
    hits = await semantic_search(ctx, search_data.query, limit=search_data.limit)

    return SearchResponse(
        results=[
            SearchResult(
                **ReadingResponse.model_validate(hit.reading).model_dump(),
                similarity=hit.similarity,
            )
            for hit in hits
        ]
    )
