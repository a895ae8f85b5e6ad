from __future__ import annotations

from typing import List, Literal, Optional, TypedDict, Union

ParseStatus = Literal["ok", "fallback"]
SearchMode = Literal["web_search", "knowledge_fallback"]


class SearchCriteria(TypedDict, total=False):
    city: str
    state: str
    ages: Union[str, List[Union[str, int]]]
    availability: str
    distance: Union[int, float, str]
    preferences: Optional[str]


class StateInfo(TypedDict):
    abbreviation: str
    full_name: str
    is_valid: bool


# Keys mirror the JSON the model is asked to return.
Activity = TypedDict(
    "Activity",
    {
        "title": str,
        "emoji": str,
        "description": str,
        "location": str,
        "distance": str,
        "ageAppropriate": bool,
        "currentInfo": Optional[str],
    },
    total=False,
)


class ParseResult(TypedDict):
    status: ParseStatus
    activities: List[Activity]


class SearchOutcome(TypedDict):
    activities: List[Activity]
    mode: SearchMode
    parse_status: ParseStatus
