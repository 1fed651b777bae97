import math
import re
from typing import Any, Optional

from fastapi import HTTPException

# Fields never sent to clients
PRIVATE_FIELDS = ("password_hash",)


def to_str_id(doc: Optional[dict]):
    if not doc:
        return doc
    d = doc.copy()
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    for field in PRIVATE_FIELDS:
        d.pop(field, None)
    return d


def ok(data: Any = None, message: Optional[str] = None, pagination: Optional[dict] = None) -> dict:
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    if message:
        body["message"] = message
    return body


def paginate(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def contains(text: str) -> dict:
    """Case-insensitive substring match on a Mongo field."""
    return {"$regex": re.escape(text), "$options": "i"}


def sort_clause(sort_by: str, sort_order: str, allowed: tuple) -> list:
    if sort_by not in allowed:
        raise HTTPException(status_code=400, detail=f"Cannot sort by '{sort_by}'")
    order = sort_order.lower()
    if order not in ("asc", "desc"):
        raise HTTPException(status_code=400, detail=f"Invalid sort order '{sort_order}'")
    direction = -1 if order == "desc" else 1
    # _id breaks ties so pages never overlap
    return [(sort_by, direction), ("_id", direction)]
