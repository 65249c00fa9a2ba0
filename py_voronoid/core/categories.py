"""
Category definitions for grouping cells.

The category set is fixed. Unknown or missing keys fall back to the
default "other" category.
"""

from typing import Dict, NamedTuple, Optional


class Category(NamedTuple):
    """Display label and base colour of a category."""
    label: str
    color: str


CATEGORIES: Dict[str, Category] = {
    "oncology": Category("Oncology", "#c44536"),
    "degenerative": Category("Ageing & degenerative", "#7b5e7b"),
    "digestive": Category("Digestion & organs", "#2d6a4f"),
    "trauma": Category("Trauma & external", "#e09f3e"),
    "infection": Category("Infection & immune", "#457b9d"),
    "reproductive": Category("Reproductive & hormonal", "#d4a373"),
    "other": Category("Other", "#6c757d"),
}

DEFAULT_CATEGORY = "other"


def normalize_category(key: Optional[str]) -> str:
    """Lower-case a category key, mapping unknown keys to the default."""
    if not key:
        return DEFAULT_CATEGORY
    key = str(key).strip().lower()
    return key if key in CATEGORIES else DEFAULT_CATEGORY


# Sample mortality dataset used by the demo script
DEFAULT_DATA = [
    {"label": "Cancer", "value": 587, "category": "oncology"},
    {"label": "Old age", "value": 310, "category": "degenerative"},
    {"label": "Neurological", "value": 163, "category": "degenerative"},
    {"label": "Heart", "value": 122, "category": "degenerative"},
    {"label": "Gastrointestinal", "value": 221, "category": "digestive"},
    {"label": "Liver", "value": 24, "category": "digestive"},
    {"label": "Kidney/Urinary", "value": 39, "category": "digestive"},
    {"label": "Accident", "value": 177, "category": "trauma"},
    {"label": "Poisoning", "value": 20, "category": "trauma"},
    {"label": "Internal bleeding", "value": 17, "category": "trauma",
     "display_label": "Internal\nbleeding", "text_color": "#b07828"},
    {"label": "Contagion", "value": 13, "category": "infection"},
    {"label": "Immune", "value": 8, "category": "infection"},
    {"label": "Respiratory", "value": 28, "category": "infection"},
    {"label": "Uterus", "value": 8, "category": "reproductive"},
    {"label": "Endocrine", "value": 27, "category": "reproductive"},
    {"label": "Motor", "value": 50, "category": "other"},
    {"label": "Behaviour", "value": 38, "category": "other"},
    {"label": "Haematological", "value": 8, "category": "other"},
    {"label": "Eye", "value": 5, "category": "other"},
    {"label": "Skin", "value": 4, "category": "other"},
    {"label": "Musculoskeletal", "value": 26, "category": "other"},
    {"label": "Miscellaneous", "value": 8, "category": "other"},
]
