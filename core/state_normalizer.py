"""US state name normalization."""

from typing import Dict, Optional

from core.models import StateInfo

STATE_NAMES: Dict[str, str] = {
    'AL': 'Alabama', 'AK': 'Alaska', 'AZ': 'Arizona', 'AR': 'Arkansas', 'CA': 'California',
    'CO': 'Colorado', 'CT': 'Connecticut', 'DE': 'Delaware', 'FL': 'Florida', 'GA': 'Georgia',
    'HI': 'Hawaii', 'ID': 'Idaho', 'IL': 'Illinois', 'IN': 'Indiana', 'IA': 'Iowa',
    'KS': 'Kansas', 'KY': 'Kentucky', 'LA': 'Louisiana', 'ME': 'Maine', 'MD': 'Maryland',
    'MA': 'Massachusetts', 'MI': 'Michigan', 'MN': 'Minnesota', 'MS': 'Mississippi', 'MO': 'Missouri',
    'MT': 'Montana', 'NE': 'Nebraska', 'NV': 'Nevada', 'NH': 'New Hampshire', 'NJ': 'New Jersey',
    'NM': 'New Mexico', 'NY': 'New York', 'NC': 'North Carolina', 'ND': 'North Dakota', 'OH': 'Ohio',
    'OK': 'Oklahoma', 'OR': 'Oregon', 'PA': 'Pennsylvania', 'RI': 'Rhode Island', 'SC': 'South Carolina',
    'SD': 'South Dakota', 'TN': 'Tennessee', 'TX': 'Texas', 'UT': 'Utah', 'VT': 'Vermont',
    'VA': 'Virginia', 'WA': 'Washington', 'WV': 'West Virginia', 'WI': 'Wisconsin', 'WY': 'Wyoming',
    'DC': 'District of Columbia',
}

_ABBREVIATIONS_BY_NAME: Dict[str, str] = {name.lower(): abbrev for abbrev, name in STATE_NAMES.items()}


def normalize_state(value: Optional[str]) -> StateInfo:
    """
    Resolve a state abbreviation or full name to its canonical pair.

    Unrecognized input is echoed back (trimmed) with ``is_valid`` set to False;
    callers decide whether that is worth a warning.
    """
    if not value:
        return {"abbreviation": "", "full_name": "", "is_valid": False}

    cleaned = value.strip()
    abbrev = cleaned.upper()
    if abbrev in STATE_NAMES:
        return {"abbreviation": abbrev, "full_name": STATE_NAMES[abbrev], "is_valid": True}

    abbrev = _ABBREVIATIONS_BY_NAME.get(cleaned.lower())
    if abbrev:
        return {"abbreviation": abbrev, "full_name": STATE_NAMES[abbrev], "is_valid": True}

    return {"abbreviation": cleaned, "full_name": cleaned, "is_valid": False}
