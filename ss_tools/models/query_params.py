"""Query parameter builder for Semantic Scholar Graph API requests."""
import copy
from typing import List, Optional, Sequence

from ss_tools.models.fields import (
    AuthorField,
    FieldOfStudy,
    FieldSelector,
    PublicationType,
    serialize_fields,
)


def percent_encode(text: str) -> str:
    """Percent-encode every byte of ``text`` that is not an ASCII letter or digit."""
    return "".join(
        chr(byte) if chr(byte).isascii() and chr(byte).isalnum() else f"%{byte:02X}"
        for byte in text.encode("utf-8")
    )


def _encode_list(values: Sequence[str]) -> str:
    return ",".join(percent_encode(value) for value in values)


class QueryParams:
    """
    Accumulates optional filters and serializes them into a URL query string.

    Every setter returns the builder itself so calls can be chained:

        params = QueryParams().query_text("graph neural networks").limit(20)
        params.build()  # "?query=graph%20neural%20networks&limit=20"

    For author endpoints the author id is carried in ``paper_id``. The
    identifier is embedded in the URL path by the endpoint resolver and never
    appears in the query string.
    """

    def __init__(self):
        self.paper_id_value: str = ""
        self.query: Optional[str] = None
        self.paper_fields: Optional[List[FieldSelector]] = None
        self.author_field_list: Optional[List[AuthorField]] = None
        self.publication_type_list: Optional[List[PublicationType]] = None
        self.open_access_pdf_only: bool = False
        self.min_citations: Optional[int] = None
        self.publication_date_range: Optional[str] = None
        self.year_range: Optional[str] = None
        self.venues: Optional[List[str]] = None
        self.fields_of_study_list: Optional[List[FieldOfStudy]] = None
        self.offset_value: Optional[int] = None
        self.limit_value: Optional[int] = None
        self.token_value: Optional[str] = None
        self.sort_value: Optional[str] = None

    def paper_id(self, paper_id: str) -> "QueryParams":
        self.paper_id_value = paper_id
        return self

    def query_text(self, query_text: str) -> "QueryParams":
        self.query = query_text
        return self

    def fields(self, fields: Sequence[FieldSelector]) -> "QueryParams":
        self.paper_fields = list(fields)
        return self

    def author_fields(self, fields: Sequence[AuthorField]) -> "QueryParams":
        self.author_field_list = list(fields)
        return self

    def publication_types(self, types: Sequence[PublicationType]) -> "QueryParams":
        self.publication_type_list = list(types)
        return self

    def open_access_pdf(self, open_access_pdf: bool = True) -> "QueryParams":
        self.open_access_pdf_only = bool(open_access_pdf)
        return self

    def min_citation_count(self, count: int) -> "QueryParams":
        self.min_citations = count
        return self

    def publication_date_or_year(self, date_range: str) -> "QueryParams":
        self.publication_date_range = date_range
        return self

    def year(self, year: str) -> "QueryParams":
        self.year_range = year
        return self

    def venue(self, venues: Sequence[str]) -> "QueryParams":
        self.venues = list(venues)
        return self

    def fields_of_study(self, fields_of_study: Sequence[FieldOfStudy]) -> "QueryParams":
        self.fields_of_study_list = list(fields_of_study)
        return self

    def offset(self, offset: int) -> "QueryParams":
        self.offset_value = offset
        return self

    def limit(self, limit: int) -> "QueryParams":
        self.limit_value = limit
        return self

    def token(self, token: str) -> "QueryParams":
        self.token_value = token
        return self

    def sort(self, sort: str) -> "QueryParams":
        self.sort_value = sort
        return self

    def copy(self) -> "QueryParams":
        """Return an independent builder with the same settings."""
        return copy.deepcopy(self)

    def has_field(self, field: FieldSelector) -> bool:
        return bool(self.paper_fields) and field in self.paper_fields

    def build(self) -> str:
        """
        Serialize the accumulated options.

        Returns:
            "" when nothing is set, otherwise "?" followed by "&"-joined
            key=value pairs in a fixed key order.
        """
        pairs: List[str] = []

        if self.query is not None:
            pairs.append(f"query={percent_encode(self.query)}")

        field_parts = []
        if self.paper_fields:
            field_parts.append(serialize_fields(self.paper_fields))
        if self.author_field_list:
            field_parts.append(serialize_fields(self.author_field_list))
        field_value = ",".join(part for part in field_parts if part)
        if field_value:
            pairs.append(f"fields={field_value}")

        if self.publication_type_list:
            values = [t.value for t in self.publication_type_list]
            pairs.append(f"publicationTypes={_encode_list(values)}")
        if self.open_access_pdf_only:
            pairs.append("openAccessPdf")
        if self.min_citations is not None:
            pairs.append(f"minCitationCount={self.min_citations}")
        if self.publication_date_range is not None:
            pairs.append(f"publicationDateOrYear={self.publication_date_range}")
        if self.year_range is not None:
            pairs.append(f"year={self.year_range}")
        if self.venues:
            pairs.append(f"venue={_encode_list(self.venues)}")
        if self.fields_of_study_list:
            values = [f.value for f in self.fields_of_study_list]
            pairs.append(f"fieldsOfStudy={_encode_list(values)}")
        if self.offset_value is not None:
            pairs.append(f"offset={self.offset_value}")
        if self.limit_value is not None:
            pairs.append(f"limit={self.limit_value}")
        if self.token_value is not None:
            pairs.append(f"token={self.token_value}")
        if self.sort_value is not None:
            pairs.append(f"sort={self.sort_value}")

        if not pairs:
            return ""
        return "?" + "&".join(pairs)

    def __repr__(self) -> str:
        return f"QueryParams(paper_id={self.paper_id_value!r}, query={self.build()!r})"
