import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

import config
from auth import require_admin
from database import create_document, get_db, get_documents, now
from initiatives import find_initiative
from responses import contains, ok, paginate, sort_clause, to_str_id
from schemas import Product, ProductUpdate, to_cents

logger = logging.getLogger(__name__)

router = APIRouter()

SORTABLE = ("title", "price", "created_at", "sku")
FEATURED_LIMIT = 6


def with_initiatives(db, docs: list) -> list:
    """Attach each product's initiative document under "initiative"."""
    slugs = {d.get("initiative_id") for d in docs if d.get("initiative_id")}
    found = {}
    if slugs:
        found = {i["slug"]: to_str_id(i) for i in db["initiative"].find({"slug": {"$in": list(slugs)}})}
    out = []
    for d in docs:
        p = to_str_id(d)
        p["initiative"] = found.get(d.get("initiative_id"))
        out.append(p)
    return out


def require_initiative(db, slug: str) -> None:
    if not find_initiative(db, slug):
        raise HTTPException(status_code=400, detail=f"Initiative '{slug}' not found")


@router.get("")
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: str = "title",
    sort_order: str = "asc",
    db=Depends(get_db),
):
    sort = sort_clause(sort_by, sort_order, SORTABLE)
    try:
        query = {"is_active": True}
        if category:
            query["initiative_id"] = category
        if search:
            query["$or"] = [{"title": contains(search)}, {"description": contains(search)}]

        total = db["product"].count_documents(query)
        docs = get_documents(db, "product", query, sort=sort, skip=(page - 1) * limit, limit=limit)
        return ok(with_initiatives(db, docs), pagination=paginate(page, limit, total))
    except Exception:
        logger.exception("Error fetching products")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.get("/featured/list")
def featured_products(db=Depends(get_db)):
    try:
        docs = get_documents(db, "product", {"is_active": True, "featured": True},
                             sort=[("created_at", -1)], limit=FEATURED_LIMIT)
        return ok(with_initiatives(db, docs))
    except Exception:
        logger.exception("Error fetching featured products")
        raise HTTPException(status_code=500, detail="Failed to fetch featured products")


@router.get("/{sku}")
def get_product(sku: str, db=Depends(get_db)):
    doc = db["product"].find_one({"sku": sku})
    if not doc:
        raise HTTPException(status_code=404, detail="Product not found")
    return ok(with_initiatives(db, [doc])[0])


@router.post("", status_code=201)
def create_product(product: Product, user: dict = Depends(require_admin), db=Depends(get_db)):
    require_initiative(db, product.initiative_id)
    payload = product.model_dump()
    payload["price"] = to_cents(product.price)
    payload["currency"] = config.CURRENCY
    try:
        doc = create_document(db, "product", payload)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="SKU already exists")
    except Exception:
        logger.exception("Error creating product")
        raise HTTPException(status_code=500, detail="Failed to create product")
    logger.info(f"Product {product.sku} created by {user['email']}")
    return ok(with_initiatives(db, [doc])[0], "Product created successfully")


@router.put("/{sku}")
def update_product(sku: str, changes: ProductUpdate, user: dict = Depends(require_admin), db=Depends(get_db)):
    update = changes.model_dump(exclude_unset=True)
    if update.get("price") is not None:
        update["price"] = to_cents(update["price"])
    if update.get("initiative_id"):
        require_initiative(db, update["initiative_id"])
    update["updated_at"] = now()
    try:
        doc = db["product"].find_one_and_update(
            {"sku": sku}, {"$set": update}, return_document=ReturnDocument.AFTER
        )
    except Exception:
        logger.exception("Error updating product")
        raise HTTPException(status_code=500, detail="Failed to update product")
    if not doc:
        raise HTTPException(status_code=404, detail="Product not found")
    return ok(with_initiatives(db, [doc])[0], "Product updated successfully")


@router.delete("/{sku}")
def delete_product(sku: str, user: dict = Depends(require_admin), db=Depends(get_db)):
    result = db["product"].update_one({"sku": sku}, {"$set": {"is_active": False, "updated_at": now()}})
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Product not found")
    return ok(message="Product deleted successfully")
