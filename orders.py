import logging
import secrets
import string
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument

import config
import email_service
from auth import get_current_user, is_admin, require_admin
from database import create_document, get_db, get_documents, now, parse_object_id
from responses import contains, ok, paginate, to_str_id
from schemas import OrderCreate, OrderStatusUpdate, to_cents
from unique_code import generate_unique_code, register_on_blockchain

logger = logging.getLogger(__name__)

router = APIRouter()

BASE36 = string.digits + string.ascii_uppercase


def generate_order_number() -> str:
    # FCL-<epoch millis>-<6 base36 chars>
    suffix = "".join(secrets.choice(BASE36) for _ in range(6))
    return f"FCL-{int(time.time() * 1000)}-{suffix}"


def customer_email(db, order: dict) -> Optional[str]:
    billing = order.get("billing_info") or {}
    if billing.get("email"):
        return billing["email"]
    user_id = order.get("user_id")
    if user_id:
        user = db["user"].find_one({"_id": parse_object_id(user_id)})
        if user:
            return user.get("email")
    return None


def notify_order_paid(db, order: dict) -> None:
    to = customer_email(db, order)
    if not to:
        logger.warning(f"No email address for order {order['order_number']}, confirmation not sent")
        return
    try:
        email_service.send_order_confirmation_email(order, to)
    except Exception:
        logger.exception(f"Error sending confirmation email for order {order['order_number']}")


def set_order_status(db, order_id: str, status: str, **fields) -> Optional[dict]:
    oid = parse_object_id(order_id, "Order not found")
    update = {"status": status, "updated_at": now(), **fields}
    return db["order"].find_one_and_update({"_id": oid}, {"$set": update}, return_document=ReturnDocument.AFTER)


def mark_order_paid(db, order_id: str, **payment_refs) -> Optional[dict]:
    """
    Move an order to "paid".

    The first time an order is paid it receives a unique code, the code is
    registered with the blockchain stub and a confirmation email goes out.
    Repeated calls (replayed webhooks, an admin re-saving the status) only
    rewrite the status.
    """
    order = set_order_status(db, order_id, "paid", **payment_refs)
    if not order:
        return None
    if order.get("unique_code"):
        return order

    code = generate_unique_code()
    registration = register_on_blockchain(code, {
        "order_number": order["order_number"],
        "total": order["total"],
        "currency": order.get("currency", config.CURRENCY),
    })
    issued = db["order"].find_one_and_update(
        {"_id": order["_id"], "unique_code": None},
        {"$set": {"unique_code": code, "blockchain_tx_id": registration.get("transaction_id")}},
        return_document=ReturnDocument.AFTER,
    )
    if not issued:
        # another request issued the code between our two writes
        return db["order"].find_one({"_id": order["_id"]})

    logger.info(f"Order {issued['order_number']} paid, unique code {code} issued")
    notify_order_paid(db, issued)
    return issued


def mark_payment_failed(db, order_id: str, **payment_refs) -> Optional[dict]:
    order = set_order_status(db, order_id, "payment_failed", **payment_refs)
    if order:
        logger.info(f"Order {order['order_number']} payment failed")
    return order


def find_user_order(db, order_id: str, user: dict) -> dict:
    query = {"_id": parse_object_id(order_id, "Order not found")}
    if not is_admin(user):
        query["user_id"] = str(user["_id"])
    order = db["order"].find_one(query)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.post("", status_code=201)
def create_order(order: OrderCreate, user: dict = Depends(get_current_user), db=Depends(get_db)):
    try:
        payload = order.model_dump()
        payload.update({
            "order_number": generate_order_number(),
            "user_id": str(user["_id"]),
            "total": to_cents(order.total),
            "currency": config.CURRENCY,
            "status": "pending",
            "unique_code": None,
            "stripe_payment_intent_id": None,
            "coinbase_invoice_id": None,
            "blockchain_tx_id": None,
        })
        doc = create_document(db, "order", payload)
        logger.info(f"Order {doc['order_number']} created for {user['email']}")
        return ok(to_str_id(doc), "Order created successfully")
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error creating order")
        raise HTTPException(status_code=500, detail="Failed to create order")


@router.get("/my-orders")
def my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    try:
        query = {"user_id": str(user["_id"])}
        total = db["order"].count_documents(query)
        docs = get_documents(db, "order", query, sort=[("created_at", -1)], skip=(page - 1) * limit, limit=limit)
        return ok([to_str_id(d) for d in docs], pagination=paginate(page, limit, total))
    except Exception:
        logger.exception("Error fetching user orders")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")


@router.get("/admin/all")
def all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[str] = None,
    search: Optional[str] = None,
    user: dict = Depends(require_admin),
    db=Depends(get_db),
):
    try:
        query = {}
        if status:
            query["status"] = status
        if search:
            query["$or"] = [
                {"order_number": contains(search)},
                {"billing_info.name": contains(search)},
                {"billing_info.email": contains(search)},
            ]
        total = db["order"].count_documents(query)
        docs = get_documents(db, "order", query, sort=[("created_at", -1)], skip=(page - 1) * limit, limit=limit)

        user_ids = list({parse_object_id(d["user_id"]) for d in docs if d.get("user_id")})
        users = {
            str(u["_id"]): {"id": str(u["_id"]), "email": u["email"], "display_name": u.get("display_name")}
            for u in db["user"].find({"_id": {"$in": user_ids}})
        }
        data = []
        for d in docs:
            o = to_str_id(d)
            o["user"] = users.get(d.get("user_id"))
            data.append(o)
        return ok(data, pagination=paginate(page, limit, total))
    except Exception:
        logger.exception("Error fetching all orders")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")


@router.get("/{order_id}")
def get_order(order_id: str, user: dict = Depends(get_current_user), db=Depends(get_db)):
    return ok(to_str_id(find_user_order(db, order_id, user)))


@router.put("/{order_id}/status")
def update_order_status(order_id: str, body: OrderStatusUpdate, user: dict = Depends(require_admin),
                        db=Depends(get_db)):
    try:
        if body.status == "paid":
            order = mark_order_paid(db, order_id)
        else:
            order = set_order_status(db, order_id, body.status)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error updating order status")
        raise HTTPException(status_code=500, detail="Failed to update order status")
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info(f"Order {order['order_number']} set to {body.status} by {user['email']}")
    return ok(to_str_id(order), "Order status updated successfully")
