import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from auth import require_admin
from database import create_document, get_db, get_documents, now
from responses import contains, ok, paginate, sort_clause, to_str_id
from schemas import Initiative, InitiativeUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

SORTABLE = ("order", "title", "created_at")
FEATURED_LIMIT = 6


def find_initiative(db, slug: str) -> Optional[dict]:
    return db["initiative"].find_one({"slug": slug})


@router.get("")
def list_initiatives(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    sort_by: str = "order",
    sort_order: str = "asc",
    db=Depends(get_db),
):
    sort = sort_clause(sort_by, sort_order, SORTABLE)
    try:
        query = {"status": "active"}
        if featured:
            query["featured"] = True
        if search:
            query["$or"] = [{"title": contains(search)}, {"summary": contains(search)}]

        total = db["initiative"].count_documents(query)
        docs = get_documents(db, "initiative", query, sort=sort, skip=(page - 1) * limit, limit=limit)
        return ok([to_str_id(d) for d in docs], pagination=paginate(page, limit, total))
    except Exception:
        logger.exception("Error fetching initiatives")
        raise HTTPException(status_code=500, detail="Failed to fetch initiatives")


@router.get("/featured/list")
def featured_initiatives(db=Depends(get_db)):
    try:
        docs = get_documents(db, "initiative", {"featured": True, "status": "active"},
                             sort=[("order", 1)], limit=FEATURED_LIMIT)
        return ok([to_str_id(d) for d in docs])
    except Exception:
        logger.exception("Error fetching featured initiatives")
        raise HTTPException(status_code=500, detail="Failed to fetch featured initiatives")


@router.get("/{slug}")
def get_initiative(slug: str, db=Depends(get_db)):
    doc = find_initiative(db, slug)
    if not doc:
        raise HTTPException(status_code=404, detail="Initiative not found")
    return ok(to_str_id(doc))


@router.post("", status_code=201)
def create_initiative(initiative: Initiative, user: dict = Depends(require_admin), db=Depends(get_db)):
    try:
        doc = create_document(db, "initiative", initiative)
        logger.info(f"Initiative {initiative.slug} created by {user['email']}")
        return ok(to_str_id(doc), "Initiative created successfully")
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Slug already exists")
    except Exception:
        logger.exception("Error creating initiative")
        raise HTTPException(status_code=500, detail="Failed to create initiative")


@router.put("/{slug}")
def update_initiative(slug: str, changes: InitiativeUpdate, user: dict = Depends(require_admin), db=Depends(get_db)):
    update = changes.model_dump(exclude_unset=True)
    update["updated_at"] = now()
    try:
        doc = db["initiative"].find_one_and_update(
            {"slug": slug}, {"$set": update}, return_document=ReturnDocument.AFTER
        )
    except Exception:
        logger.exception("Error updating initiative")
        raise HTTPException(status_code=500, detail="Failed to update initiative")
    if not doc:
        raise HTTPException(status_code=404, detail="Initiative not found")
    return ok(to_str_id(doc), "Initiative updated successfully")


@router.delete("/{slug}")
def delete_initiative(slug: str, user: dict = Depends(require_admin), db=Depends(get_db)):
    result = db["initiative"].update_one({"slug": slug}, {"$set": {"status": "inactive", "updated_at": now()}})
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Initiative not found")
    return ok(message="Initiative deleted successfully")
