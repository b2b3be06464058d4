"""Pydantic models for Semantic Scholar API responses.

The API echoes back only the fields that were requested, so every attribute
is optional. Only structurally invalid payloads (wrong types) are rejected.
"""
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ss_tools.utils.errors import ParseError

T = TypeVar("T")


class APIModel(BaseModel):
    """Base model: snake_case attributes, camelCase wire names, extras ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class PublicationVenue(APIModel):
    """Structured publication venue."""

    id: Optional[str] = None
    name: Optional[str] = None
    type_name: Optional[str] = Field(default=None, alias="type")
    url: Optional[str] = None
    alternate_names: Optional[List[str]] = None


class OpenAccessPdf(APIModel):
    url: Optional[str] = None
    status: Optional[str] = None


class S2FieldOfStudy(APIModel):
    category: Optional[str] = None
    source: Optional[str] = None


class Journal(APIModel):
    name: Optional[str] = None
    volume: Optional[str] = None
    pages: Optional[str] = None


class CitationStyles(APIModel):
    bibtex: Optional[str] = None


class Embedding(APIModel):
    model: Optional[str] = None
    vector: Optional[List[float]] = None


class Author(APIModel):
    """Author information."""

    author_id: Optional[str] = Field(default=None, alias="authorId")
    url: Optional[str] = None
    name: Optional[str] = None
    affiliations: Optional[List[str]] = None
    homepage: Optional[str] = None
    paper_count: Optional[int] = Field(default=None, alias="paperCount")
    citation_count: Optional[int] = Field(default=None, alias="citationCount")
    h_index: Optional[int] = Field(default=None, alias="hIndex")


class Paper(APIModel):
    """Semantic Scholar paper metadata."""

    paper_id: Optional[str] = Field(default=None, alias="paperId")
    corpus_id: Optional[int] = Field(default=None, alias="corpusId")
    url: Optional[str] = None
    title: Optional[str] = None
    abstract: Optional[str] = None
    venue: Optional[str] = None
    publication_venue: Optional[PublicationVenue] = Field(
        default=None, alias="publicationVenue"
    )
    year: Optional[int] = None
    reference_count: Optional[int] = Field(default=None, alias="referenceCount")
    citation_count: Optional[int] = Field(default=None, alias="citationCount")
    influential_citation_count: Optional[int] = Field(
        default=None, alias="influentialCitationCount"
    )
    is_open_access: Optional[bool] = Field(default=None, alias="isOpenAccess")
    open_access_pdf: Optional[OpenAccessPdf] = Field(default=None, alias="openAccessPdf")
    fields_of_study: Optional[List[str]] = Field(default=None, alias="fieldsOfStudy")
    s2_fields_of_study: Optional[List[S2FieldOfStudy]] = Field(
        default=None, alias="s2FieldsOfStudy"
    )
    publication_types: Optional[List[str]] = Field(default=None, alias="publicationTypes")
    publication_date: Optional[str] = Field(default=None, alias="publicationDate")
    journal: Optional[Journal] = None
    citation_styles: Optional[CitationStyles] = Field(default=None, alias="citationStyles")
    authors: Optional[List[Author]] = None
    citations: Optional[List["Paper"]] = None
    references: Optional[List["Paper"]] = None
    embedding: Optional[Embedding] = None
    # Only populated by title search
    match_score: Optional[float] = Field(default=None, alias="matchScore")


class PaperSearchResponse(APIModel):
    """Envelope returned by paper/search and paper/search/match."""

    total: Optional[int] = None
    offset: Optional[int] = None
    next: Optional[int] = None
    token: Optional[str] = None
    data: List[Paper] = Field(default_factory=list)


class PaperContext(APIModel):
    """A citation context snippet with its intent labels."""

    context: Optional[str] = None
    intents: Optional[List[str]] = None


class CitationEdge(APIModel):
    """One citing/cited relationship with its context metadata."""

    contexts: Optional[List[str]] = None
    intents: Optional[List[str]] = None
    contexts_with_intent: Optional[List[PaperContext]] = Field(
        default=None, alias="contextsWithIntent"
    )
    is_influential: Optional[bool] = Field(default=None, alias="isInfluential")
    citing_paper: Optional[Paper] = Field(default=None, alias="citingPaper")
    cited_paper: Optional[Paper] = Field(default=None, alias="citedPaper")

    @property
    def paper(self) -> Optional[Paper]:
        """The paper on the other end of the edge, whichever side is set."""
        return self.citing_paper or self.cited_paper


class CitationResponse(APIModel):
    """Envelope returned by paper/{id}/citations and paper/{id}/references."""

    offset: Optional[int] = None
    next: Optional[int] = None
    data: List[CitationEdge] = Field(default_factory=list)


class AuthorSearchResponse(APIModel):
    offset: Optional[int] = None
    next: Optional[int] = None
    total: Optional[int] = None
    data: List[Author] = Field(default_factory=list)


class AuthorPapersResponse(APIModel):
    offset: Optional[int] = None
    next: Optional[int] = None
    data: List[Paper] = Field(default_factory=list)


class PaperAuthorsResponse(APIModel):
    offset: Optional[int] = None
    next: Optional[int] = None
    data: List[Author] = Field(default_factory=list)


PaperBatch = List[Optional[Paper]]


def parse_response(model: Type[T], payload: Any) -> T:
    """
    Validate a decoded JSON payload against a model or type.

    Args:
        model: Pydantic model class or a typing construct such as PaperBatch
        payload: Decoded JSON

    Returns:
        Validated instance

    Raises:
        ParseError: If the payload does not match the schema
    """
    try:
        if isinstance(model, type) and issubclass(model, BaseModel):
            return model.model_validate(payload)
        return TypeAdapter(model).validate_python(payload)
    except PydanticValidationError as e:
        raise ParseError(f"Response does not match {_type_name(model)}: {e}") from e


def _type_name(model: Any) -> str:
    return getattr(model, "__name__", None) or str(model)
