"""Field selectors and filter vocabularies for the Semantic Scholar Graph API.

Leaf selectors are enum members whose value is the exact wire name. Nested
selections are expressed with the composite wrappers below, e.g.

    Authors(AuthorField.NAME, AuthorField.H_INDEX)
    -> "authors.name,authors.hIndex"
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple, Union


class AuthorField(str, Enum):
    """Attributes that can be requested for an author."""

    AUTHOR_ID = "authorId"
    NAME = "name"
    URL = "url"
    AFFILIATIONS = "affiliations"
    HOMEPAGE = "homepage"
    PAPER_COUNT = "paperCount"
    CITATION_COUNT = "citationCount"
    H_INDEX = "hIndex"


class PaperField(str, Enum):
    """Leaf attributes that can be requested for a paper."""

    PAPER_ID = "paperId"
    CORPUS_ID = "corpusId"
    URL = "url"
    TITLE = "title"
    ABSTRACT = "abstract"
    VENUE = "venue"
    PUBLICATION_VENUE = "publicationVenue"
    YEAR = "year"
    REFERENCE_COUNT = "referenceCount"
    CITATION_COUNT = "citationCount"
    INFLUENTIAL_CITATION_COUNT = "influentialCitationCount"
    IS_OPEN_ACCESS = "isOpenAccess"
    OPEN_ACCESS_PDF = "openAccessPdf"
    FIELDS_OF_STUDY = "fieldsOfStudy"
    S2_FIELDS_OF_STUDY = "s2FieldsOfStudy"
    PUBLICATION_TYPES = "publicationTypes"
    PUBLICATION_DATE = "publicationDate"
    JOURNAL = "journal"
    CITATION_STYLES = "citationStyles"
    EMBEDDING = "embedding.specter_v2"
    # Citation/reference relationship attributes
    CONTEXTS = "contexts"
    INTENTS = "intents"
    IS_INFLUENTIAL = "isInfluential"
    CONTEXTS_WITH_INTENT = "contextsWithIntent"


@dataclass(frozen=True)
class _Composite:
    """Namespace prefix applied to an ordered list of child selectors."""

    prefix = ""
    children: Tuple

    def __init__(self, *children):
        # Accept both Authors(a, b) and Authors([a, b])
        if len(children) == 1 and isinstance(children[0], (list, tuple)):
            children = tuple(children[0])
        object.__setattr__(self, "children", tuple(children))

    def __str__(self) -> str:
        return serialize_field(self)


class Authors(_Composite):
    """Author attributes nested under a paper: ``authors.<field>``."""

    prefix = "authors"


class Citations(_Composite):
    """Paper attributes of citing papers: ``citations.<field>``."""

    prefix = "citations"


class References(_Composite):
    """Paper attributes of referenced papers: ``references.<field>``."""

    prefix = "references"


FieldSelector = Union[PaperField, AuthorField, Authors, Citations, References]


def serialize_field(field: FieldSelector) -> str:
    """Return the wire fragment for one selector.

    Composites expand to ``prefix.child`` for every child, recursively, joined
    by commas. An empty composite serializes to the empty string.

    Raises:
        TypeError: If the value is not a known selector.
    """
    if isinstance(field, (PaperField, AuthorField)):
        return field.value
    if isinstance(field, _Composite):
        parts = []
        for child in field.children:
            child_value = serialize_field(child)
            if not child_value:
                continue
            # A nested composite already yields a comma list; prefix each item
            parts.extend(f"{field.prefix}.{item}" for item in child_value.split(","))
        return ",".join(parts)
    raise TypeError(f"Unsupported field selector: {field!r}")


def serialize_fields(fields: Iterable[FieldSelector]) -> str:
    """Comma-join the wire fragments of several selectors, skipping empty ones."""
    return ",".join(part for part in (serialize_field(f) for f in fields) if part)


class PublicationType(str, Enum):
    """Publication type filter values."""

    REVIEW = "Review"
    JOURNAL_ARTICLE = "JournalArticle"
    CASE_REPORT = "CaseReport"
    CLINICAL_TRIAL = "Clinical Trial"
    CONFERENCE = "Conference"
    DATASET = "Dataset"
    EDITORIAL = "Editorial"
    LETTERS_AND_COMMENTS = "LettersAndComments"
    META_ANALYSIS = "Meta-Analysis"
    NEWS = "News"
    STUDY = "Study"
    BOOK = "Book"
    BOOK_SECTION = "Book Section"


class FieldOfStudy(str, Enum):
    """Field-of-study filter values."""

    COMPUTER_SCIENCE = "Computer Science"
    MEDICINE = "Medicine"
    CHEMISTRY = "Chemistry"
    BIOLOGY = "Biology"
    MATERIALS_SCIENCE = "Materials Science"
    PHYSICS = "Physics"
    GEOLOGY = "Geology"
    PSYCHOLOGY = "Psychology"
    ART = "Art"
    HISTORY = "History"
    GEOGRAPHY = "Geography"
    SOCIOLOGY = "Sociology"
    BUSINESS = "Business"
    POLITICAL_SCIENCE = "Political Science"
    ECONOMICS = "Economics"
    PHILOSOPHY = "Philosophy"
    MATHEMATICS = "Mathematics"
    ENGINEERING = "Engineering"
    ENVIRONMENTAL_SCIENCE = "Environmental Science"
    AGRICULTURAL_AND_FOOD_SCIENCE = "Agricultural and Food Science"
    EDUCATION = "Education"
    LAW = "Law"
    LINGUISTICS = "Linguistics"
