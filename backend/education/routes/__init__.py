"""HTTP controllers grouped by resource family.

- `catalog`: programs, educational occupational programs, courses, activities
- `testing`: tests, their ordered stages and the stages' ordered questions
- `enrollment`: participants, groups, education events, results, reviews

Controllers are thin: they parse query parameters, delegate to the
services and shape responses. Service errors are mapped to HTTP status
codes by the exception handlers registered in `education.main`.
"""

from typing import Optional

from fastapi import Query

from ..config import settings


def page_params(
    page: int = Query(1, ge=1),
    items_per_page: Optional[int] = Query(None, ge=1),
) -> dict:
    """Translate `page`/`items_per_page` into repository offset/limit."""
    size = min(items_per_page or settings.ITEMS_PER_PAGE, settings.MAX_ITEMS_PER_PAGE)
    return {"offset": (page - 1) * size, "limit": size}
