"""
Pytest configuration and shared data factories.

- Adds project root to sys.path so imports like 'from ss_tools.api.base import BaseAPIClient' work
  without installing the package.
"""
import os
import sys

# Project root (directory containing ss_tools/ and tests/)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def make_paper(
    paper_id="p1",
    title="Test Paper",
    year=2020,
    citation_count=500,
    abstract="Test abstract.",
    venue="NeurIPS",
    authors=None,
    match_score=None,
):
    paper = {
        "paperId": paper_id,
        "title": title,
        "year": year,
        "citationCount": citation_count,
        "influentialCitationCount": 50,
        "referenceCount": 20,
        "abstract": abstract,
        "venue": venue,
        "authors": authors or [{"authorId": "a1", "name": "Alice Smith"}],
        "url": f"https://www.semanticscholar.org/paper/{paper_id}",
    }
    if match_score is not None:
        paper["matchScore"] = match_score
    return paper


def make_author(author_id="a1", name="Alice Smith", h_index=25):
    return {
        "authorId": author_id,
        "name": name,
        "url": f"https://www.semanticscholar.org/author/{author_id}",
        "affiliations": ["MIT"],
        "paperCount": 50,
        "citationCount": 1000,
        "hIndex": h_index,
    }


def make_citation(paper_id="c1", title="Citing Paper", direction="citingPaper"):
    return {
        "contexts": ["We build upon this work."],
        "intents": ["methodology"],
        "isInfluential": True,
        direction: {"paperId": paper_id, "title": title},
    }
