"""Semantic Scholar API client."""
from typing import Any, List, Optional, Sequence, Type, TypeVar, Union

import httpx

from ss_tools.api.base import RETRYABLE_ERRORS, BaseAPIClient, RetryBudget
from ss_tools.api.endpoints import Endpoint, resolve_url
from ss_tools.models.api_models import (
    Author,
    AuthorPapersResponse,
    AuthorSearchResponse,
    CitationResponse,
    Paper,
    PaperAuthorsResponse,
    PaperBatch,
    PaperSearchResponse,
    parse_response,
)
from ss_tools.models.fields import FieldSelector, PaperField
from ss_tools.models.query_params import QueryParams
from ss_tools.utils.config import Settings, load_settings
from ss_tools.utils.errors import EmptyResultError
from ss_tools.utils.logging import get_logger
from ss_tools.utils.similarity import select_best_match

logger = get_logger(__name__)

T = TypeVar("T")

RetryCount = Union[int, RetryBudget]


class SemanticScholarClient(BaseAPIClient):
    """
    Typed client for the Semantic Scholar Graph API.

    Every operation takes a QueryParams builder plus a retry budget and a
    fixed wait between attempts; both default to the values in Settings.

    Example:
        async with SemanticScholarClient() as ss:
            params = QueryParams().query_text("Attention Is All You Need")
            paper = await ss.query_a_paper_by_title(params, 5, 10)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Semantic Scholar client.

        Args:
            settings: Explicit configuration; read from the environment when omitted
            api_key: Overrides settings.semantic_scholar_api_key
            transport: Optional httpx transport
        """
        self.settings = settings or load_settings()
        super().__init__(
            base_url=self.settings.semantic_scholar_base_url,
            timeout=self.settings.semantic_scholar_request_timeout,
            transport=transport,
        )
        if api_key is None:
            api_key = self.settings.semantic_scholar_api_key
        self.api_key = api_key

    def _get_headers(self) -> dict:
        """Get request headers with API key if available."""
        headers = {"User-Agent": self.settings.user_agent}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    async def _execute(
        self,
        endpoint: Endpoint,
        params: QueryParams,
        model: Type[T],
        operation: str,
        target: str,
        max_retry_count: Optional[RetryCount],
        wait_time: Optional[float],
        require_results: bool = False,
        body: Optional[Any] = None,
    ) -> T:
        """Resolve the URL once, then fetch and parse it under the retry policy."""
        identifier = params.paper_id_value if endpoint.needs_identifier else None
        url = resolve_url(self.base_url, endpoint, params.build(), identifier)

        if max_retry_count is None:
            max_retry_count = self.settings.semantic_scholar_max_retries
        if wait_time is None:
            wait_time = self.settings.semantic_scholar_retry_wait

        method = "GET"
        extra_headers = None
        if body is not None:
            method = "POST"
            extra_headers = {"Content-Type": "application/json"}

        async def fetch():
            payload = await self._make_request(
                method, url, json=body, headers=extra_headers
            )
            result = parse_response(model, payload)
            if require_results and not result.data:
                raise EmptyResultError(f"No papers found for {target!r}")
            return result

        retry_on = RETRYABLE_ERRORS
        if require_results:
            retry_on = RETRYABLE_ERRORS + (EmptyResultError,)

        logger.debug(f"{method} {url}")
        return await self._retry_with_delay(
            fetch,
            operation=operation,
            target=target,
            max_retries=max_retry_count,
            delay=wait_time,
            retry_on=retry_on,
        )

    @staticmethod
    def _require_query(params: QueryParams) -> str:
        if not params.query:
            raise ValueError("query_text must be set for a search")
        return params.query

    @staticmethod
    def _with_paper_id(params: QueryParams) -> QueryParams:
        """Copy of params whose field selection includes paperId."""
        if params.paper_fields and not params.has_field(PaperField.PAPER_ID):
            params = params.copy()
            params.fields(params.paper_fields + [PaperField.PAPER_ID])
        return params

    # ------------------------------------------------------------------
    # Paper data
    # ------------------------------------------------------------------

    async def query_papers_by_title(
        self,
        params: QueryParams,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> List[Paper]:
        """
        Relevance search over paper titles.

        An empty result is retried like a failure.

        Returns:
            Candidate papers in remote relevance order
        """
        query = self._require_query(params)
        response = await self._execute(
            Endpoint.PAPER_TITLE_SEARCH,
            params,
            PaperSearchResponse,
            operation="get papers by title",
            target=query,
            max_retry_count=max_retry_count,
            wait_time=wait_time,
            require_results=True,
        )
        logger.info(f"Found {len(response.data)} papers for {query!r}")
        return response.data

    async def query_a_paper_by_title(
        self,
        params: QueryParams,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> Paper:
        """
        Resolve a title to the single best-matching paper.

        Candidates from the title-match endpoint are re-ranked by blending the
        remote match score with title edit-distance similarity.
        """
        query = self._require_query(params)
        response = await self._execute(
            Endpoint.PAPER_TITLE_MATCH,
            params,
            PaperSearchResponse,
            operation="get paper id",
            target=query,
            max_retry_count=max_retry_count,
            wait_time=wait_time,
            require_results=True,
        )
        paper = select_best_match(query, response.data)
        logger.info(f"Matched {query!r} to {paper.paper_id}: {paper.title}")
        return paper

    async def query_paper_details(
        self,
        params: QueryParams,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> Paper:
        """Get paper metadata by ID. paperId is always part of a field selection."""
        params = self._with_paper_id(params)
        paper = await self._execute(
            Endpoint.PAPER_DETAILS,
            params,
            Paper,
            operation="get paper details",
            target=params.paper_id_value,
            max_retry_count=max_retry_count,
            wait_time=wait_time,
        )
        logger.info(f"Fetched from API: {params.paper_id_value}: {paper.title or 'N/A'}")
        return paper

    async def query_paper_citations(
        self,
        params: QueryParams,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> CitationResponse:
        """Get papers citing this paper, with citation contexts and intents."""
        params = self._with_paper_id(params)
        response = await self._execute(
            Endpoint.PAPER_CITATIONS,
            params,
            CitationResponse,
            operation="get paper citations",
            target=params.paper_id_value,
            max_retry_count=max_retry_count,
            wait_time=wait_time,
        )
        logger.info(
            f"Fetched {len(response.data)} citations for paper {params.paper_id_value}"
        )
        return response

    async def query_paper_references(
        self,
        params: QueryParams,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> CitationResponse:
        """Get papers referenced by this paper."""
        params = self._with_paper_id(params)
        response = await self._execute(
            Endpoint.PAPER_REFERENCES,
            params,
            CitationResponse,
            operation="get paper references",
            target=params.paper_id_value,
            max_retry_count=max_retry_count,
            wait_time=wait_time,
        )
        logger.info(
            f"Fetched {len(response.data)} references for paper {params.paper_id_value}"
        )
        return response

    async def query_paper_authors(
        self,
        params: QueryParams,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> PaperAuthorsResponse:
        return await self._execute(
            Endpoint.PAPER_AUTHORS,
            params,
            PaperAuthorsResponse,
            operation="get paper authors",
            target=params.paper_id_value,
            max_retry_count=max_retry_count,
            wait_time=wait_time,
        )

    async def bulk_query_by_ids(
        self,
        paper_ids: Sequence[str],
        fields: Optional[Sequence[FieldSelector]] = None,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> List[Optional[Paper]]:
        """
        Get details for several papers in one POST.

        Returns:
            One entry per requested id, in request order; None where the
            API could not resolve the id

        Raises:
            ValueError: If paper_ids is empty
        """
        if not paper_ids:
            raise ValueError("paper_ids must contain at least one id")

        params = QueryParams()
        if fields:
            params.fields(fields)

        papers = await self._execute(
            Endpoint.PAPER_BATCH,
            params,
            PaperBatch,
            operation="get papers",
            target=", ".join(paper_ids),
            max_retry_count=max_retry_count,
            wait_time=wait_time,
            body={"ids": list(paper_ids)},
        )
        logger.info(f"Fetched {len(papers)} papers in batch")
        return papers

    # ------------------------------------------------------------------
    # Author data (the author id travels in params.paper_id)
    # ------------------------------------------------------------------

    async def query_author_details(
        self,
        params: QueryParams,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> Author:
        return await self._execute(
            Endpoint.AUTHOR_DETAILS,
            params,
            Author,
            operation="get author details",
            target=params.paper_id_value,
            max_retry_count=max_retry_count,
            wait_time=wait_time,
        )

    async def search_authors(
        self,
        params: QueryParams,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> AuthorSearchResponse:
        query = self._require_query(params)
        return await self._execute(
            Endpoint.AUTHOR_SEARCH,
            params,
            AuthorSearchResponse,
            operation="search authors",
            target=query,
            max_retry_count=max_retry_count,
            wait_time=wait_time,
        )

    async def query_author_papers(
        self,
        params: QueryParams,
        max_retry_count: Optional[RetryCount] = None,
        wait_time: Optional[float] = None,
    ) -> AuthorPapersResponse:
        return await self._execute(
            Endpoint.AUTHOR_PAPERS,
            params,
            AuthorPapersResponse,
            operation="get author papers",
            target=params.paper_id_value,
            max_retry_count=max_retry_count,
            wait_time=wait_time,
        )
