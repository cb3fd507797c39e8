"""Static reference data used by the row generators."""

from __future__ import annotations

from typing import NamedTuple


class Nation(NamedTuple):
    """Nation with its region and ISO 3166-1 alpha-2 code."""

    key: int
    name: str
    region: str
    iso: str


NATIONS: tuple[Nation, ...] = (
    Nation(0, "ALGERIA", "AFRICA", "DZ"),
    Nation(1, "ARGENTINA", "AMERICA", "AR"),
    Nation(2, "BRAZIL", "AMERICA", "BR"),
    Nation(3, "CANADA", "AMERICA", "CA"),
    Nation(4, "EGYPT", "MIDDLE EAST", "EG"),
    Nation(5, "ETHIOPIA", "AFRICA", "ET"),
    Nation(6, "FRANCE", "EUROPE", "FR"),
    Nation(7, "GERMANY", "EUROPE", "DE"),
    Nation(8, "INDIA", "ASIA", "IN"),
    Nation(9, "INDONESIA", "ASIA", "ID"),
    Nation(10, "IRAN", "MIDDLE EAST", "IR"),
    Nation(11, "IRAQ", "MIDDLE EAST", "IQ"),
    Nation(12, "JAPAN", "ASIA", "JP"),
    Nation(13, "JORDAN", "MIDDLE EAST", "JO"),
    Nation(14, "KENYA", "AFRICA", "KE"),
    Nation(15, "MOROCCO", "AFRICA", "MA"),
    Nation(16, "MOZAMBIQUE", "AFRICA", "MZ"),
    Nation(17, "PERU", "AMERICA", "PE"),
    Nation(18, "CHINA", "ASIA", "CN"),
    Nation(19, "ROMANIA", "EUROPE", "RO"),
    Nation(20, "SAUDI ARABIA", "MIDDLE EAST", "SA"),
    Nation(21, "VIETNAM", "ASIA", "VN"),
    Nation(22, "RUSSIA", "EUROPE", "RU"),
    Nation(23, "UNITED KINGDOM", "EUROPE", "GB"),
    Nation(24, "UNITED STATES", "AMERICA", "US"),
)

MANUFACTURER_COUNT = 5
BRANDS_PER_MANUFACTURER = 5

VEHICLE_TYPE_SYLLABLES: tuple[tuple[str, ...], ...] = (
    ("STANDARD", "SMALL", "MEDIUM", "LARGE", "ECONOMY", "PROMO"),
    ("ANODIZED", "BURNISHED", "PLATED", "POLISHED", "BRUSHED"),
    ("TIN", "NICKEL", "BRASS", "STEEL", "COPPER"),
)

# Relative frequency of vehicle size classes
VEHICLE_SIZE_WEIGHTS: dict[str, int] = {
    "STANDARD": 30,
    "SMALL": 25,
    "MEDIUM": 20,
    "LARGE": 10,
    "ECONOMY": 10,
    "PROMO": 5,
}

BUILDING_NAME_WORDS: tuple[str, ...] = (
    "almond", "antique", "aquamarine", "azure", "beige", "bisque", "black",
    "blanched", "blue", "blush", "brown", "burlywood", "burnished", "chartreuse",
    "chiffon", "chocolate", "coral", "cornflower", "cornsilk", "cream", "cyan",
    "dark", "deep", "dim", "dodger", "drab", "firebrick", "floral", "forest",
    "frosted", "gainsboro", "ghost", "goldenrod", "green", "grey", "honeydew",
    "hot", "indian", "ivory", "khaki", "lace", "lavender", "lawn", "lemon",
    "light", "lime", "linen", "magenta", "maroon", "medium", "metallic",
    "midnight", "mint", "misty", "moccasin", "navajo", "navy", "olive",
    "orange", "orchid", "pale", "papaya", "peach", "peru", "pink", "plum",
    "powder", "puff", "purple", "red", "rose", "rosy", "royal", "saddle",
    "salmon", "sandy", "seashell", "sienna", "sky", "slate", "smoke", "snow",
    "spring", "steel", "tan", "thistle", "tomato", "turquoise", "violet",
    "wheat", "white", "yellow",
)  # fmt: skip

# Zone boundary size relative to the configured polysize, per subtype
ZONE_SUBTYPE_SCALE: dict[str, float] = {
    "microhood": 1.0,
    "macrohood": 2.0,
    "neighborhood": 1.5,
    "county": 8.0,
    "localadmin": 6.0,
    "locality": 4.0,
    "region": 20.0,
    "dependency": 10.0,
    "country": 40.0,
}
