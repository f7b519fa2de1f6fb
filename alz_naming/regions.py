"""Region abbreviations for Azure resource names.

Maps Azure region display names (as shown in the portal, e.g. ``UK South``)
to the short codes embedded in resource names. Regions missing from the table
fall back to a derived three-character code so that new regions never block
name generation; the derived codes are not guaranteed to be unique, so the
table should be extended when a new region is adopted.
"""

import logging
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

FALLBACK_LENGTH = 3

REGION_ABBREVIATIONS: Mapping[str, str] = {
    # Europe
    "UK South": "uks",
    "UK West": "ukw",
    "West Europe": "we",
    "North Europe": "ne",
    "France Central": "frc",
    "France South": "frs",
    "Germany West Central": "gwc",
    "Germany North": "gn",
    "Norway East": "noe",
    "Norway West": "now",
    "Sweden Central": "sdc",
    "Switzerland North": "szn",
    "Switzerland West": "szw",
    "Poland Central": "plc",
    "Italy North": "itn",
    "Spain Central": "spc",
    # Americas
    "East US": "eus",
    "East US 2": "eus2",
    "West US": "wus",
    "West US 2": "wus2",
    "West US 3": "wus3",
    "Central US": "cus",
    "North Central US": "ncus",
    "South Central US": "scus",
    "West Central US": "wcus",
    "Canada Central": "cac",
    "Canada East": "cae",
    "Brazil South": "brs",
    # Asia Pacific
    "East Asia": "ea",
    "Southeast Asia": "sea",
    "Japan East": "jpe",
    "Japan West": "jpw",
    "Korea Central": "krc",
    "Korea South": "krs",
    "Australia East": "aue",
    "Australia Southeast": "ause",
    "Australia Central": "auc",
    "Central India": "inc",
    "South India": "ins",
    "West India": "inw",
    # Middle East & Africa
    "UAE North": "uaen",
    "Qatar Central": "qac",
    "Israel Central": "ilc",
    "South Africa North": "san",
}


def derive_abbreviation(location: str) -> str:
    """Derive a best-effort code for a region missing from the table."""
    return location.lower().replace(" ", "")[:FALLBACK_LENGTH]


def abbreviate(location: str, table: Optional[Mapping[str, str]] = None) -> str:
    """Return the short code for an Azure region display name.

    The lookup is exact and case-sensitive. Unknown regions fall back to the
    first three characters of the lower-cased name with spaces removed.

    Args:
        location: Azure region display name, e.g. ``"UK South"``
        table: Optional replacement abbreviation table

    Returns:
        Region code, e.g. ``"uks"``. Empty input yields an empty string.
    """
    lookup = REGION_ABBREVIATIONS if table is None else table
    code = lookup.get(location)
    if code is not None:
        return code

    derived = derive_abbreviation(location)
    logger.debug(f"Region '{location}' not in abbreviation table, derived '{derived}'")
    return derived


class RegionAbbreviator:
    """Region abbreviator with an optional set of extra regions.

    Extra entries are layered over the built-in table without mutating it.
    """

    def __init__(self, extra_regions: Optional[Mapping[str, str]] = None) -> None:
        self._table: Dict[str, str] = dict(REGION_ABBREVIATIONS)
        if extra_regions:
            self._table.update(extra_regions)

    def abbreviate(self, location: str) -> str:
        return abbreviate(location, self._table)

    def is_known(self, location: str) -> bool:
        return location in self._table

    @property
    def table(self) -> Dict[str, str]:
        return dict(self._table)
