"""Result model and search parameters shared by the tests."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from FacetSearch.core.params import SearchParameter
from FacetSearch.metadata.fields import (
    FacetField,
    FacetMethod,
    FacetSort,
    FullTextSearchField,
    WildcardPadding,
    search_field,
)


class Country(Enum):
    US = "US"
    CA = "CA"
    DE = "DE"


class BasisOfRecord(Enum):
    PRESERVED_SPECIMEN = "PRESERVED_SPECIMEN"
    HUMAN_OBSERVATION = "HUMAN_OBSERVATION"


class OccurrenceSearchParameter(SearchParameter):
    SCIENTIFIC_NAME = str
    COUNTRY = Country
    BASIS_OF_RECORD = BasisOfRecord
    YEAR = int
    ELEVATION = float
    EVENT_DATE = date
    HAS_COORDINATE = bool
    DATASET_KEY = str
    RECORDED_BY = str


P = OccurrenceSearchParameter


@dataclass
class Occurrence:
    key: str | None = search_field()
    scientific_name: str | None = search_field(
        full_text=FullTextSearchField(
            partial_matching=WildcardPadding.RIGHT,
            partial_match_score=0.5,
            exact_match_score=10.0,
            highlight=True,
        ),
        parameter=P.SCIENTIFIC_NAME,
    )
    vernacular_name: str | None = search_field(
        full_text=FullTextSearchField(
            partial_matching=WildcardPadding.BOTH,
            partial_match_score=0.2,
            highlight=True,
        ),
    )
    description: str | None = search_field(full_text=FullTextSearchField(exact_match_score=0.1))
    country: str | None = search_field(facet=FacetField(facet=P.COUNTRY))
    basis_of_record: str | None = search_field(
        facet=FacetField(facet="BASIS_OF_RECORD", method=FacetMethod.ENUM, missing=True),
    )
    dataset: str | None = search_field(
        native="dataset_key",
        facet=FacetField(facet=P.DATASET_KEY, sort=FacetSort.INDEX),
    )
    year: int | None = search_field(facet=FacetField(facet=P.YEAR, sort=FacetSort.INDEX))
    elevation: float | None = search_field(parameter=P.ELEVATION)
    event_date: date | None = search_field(parameter="event_date")
    has_coordinate: bool | None = search_field(parameter=P.HAS_COORDINATE)
    notes: str | None = None
