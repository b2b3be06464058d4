"""Endpoint paths of the Semantic Scholar Graph API."""
from enum import Enum
from typing import Optional


class Endpoint(str, Enum):
    """Logical operations mapped to their path templates."""

    PAPER_BATCH = "paper/batch"
    PAPER_TITLE_SEARCH = "paper/search"
    PAPER_TITLE_MATCH = "paper/search/match"
    PAPER_DETAILS = "paper/{id}"
    PAPER_CITATIONS = "paper/{id}/citations"
    PAPER_REFERENCES = "paper/{id}/references"
    PAPER_AUTHORS = "paper/{id}/authors"
    AUTHOR_DETAILS = "author/{id}"
    AUTHOR_SEARCH = "author/search"
    AUTHOR_PAPERS = "author/{id}/papers"

    @property
    def needs_identifier(self) -> bool:
        return "{id}" in self.value


def resolve_url(
    base_url: str,
    endpoint: Endpoint,
    query_string: str = "",
    identifier: Optional[str] = None,
) -> str:
    """
    Build the absolute request URL for an endpoint.

    The identifier is embedded verbatim; its shape is not validated, so a
    malformed id surfaces as a remote 4xx response.

    Args:
        base_url: API root, e.g. https://api.semanticscholar.org/graph/v1
        endpoint: Endpoint to call
        query_string: Output of QueryParams.build() ("" or "?...")
        identifier: Paper or author id for path-embedded endpoints

    Raises:
        ValueError: If a path-embedded endpoint is given no identifier
    """
    if endpoint.needs_identifier:
        if not identifier:
            raise ValueError(f"Endpoint {endpoint.name} requires an identifier")
        path = endpoint.value.replace("{id}", identifier)
    else:
        path = endpoint.value

    return f"{base_url.rstrip('/')}/{path}{query_string}"
