RECYCLING_CATEGORIES = ("plastic", "glass", "paper", "metal", "ewaste", "textile")

CATEGORY_POINTS = {
    "plastic": 25,
    "glass": 35,
    "paper": 20,
    "metal": 30,
    "ewaste": 50,
    "textile": 40,
}

DEFAULT_POINTS = 10


def normalize_category(label: str | None) -> str | None:
    """Return the known category for ``label`` or None when it is not one."""
    if not label:
        return None
    normalized = label.strip().lower()
    return normalized if normalized in CATEGORY_POINTS else None


def points_for(category: str | None) -> int:
    known = normalize_category(category)
    if known is None:
        return DEFAULT_POINTS
    return CATEGORY_POINTS[known]


def points_table() -> dict:
    return {"categories": dict(CATEGORY_POINTS), "default_points": DEFAULT_POINTS}
