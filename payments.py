"""
Payments Router
Stripe payment intents, Coinbase Commerce charges, and the webhooks that
move orders to paid / payment_failed.
"""
import hashlib
import hmac
import json
import logging
from typing import Optional

import httpx
import stripe
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from starlette.concurrency import run_in_threadpool

import config
from auth import get_current_user
from database import get_db, now, parse_object_id
from orders import mark_order_paid, mark_payment_failed
from responses import ok
from schemas import PaymentRequest, to_cents

logger = logging.getLogger(__name__)

router = APIRouter()


def payable_order(db, body: PaymentRequest, user: dict) -> dict:
    order = db["order"].find_one({
        "_id": parse_object_id(body.order_id, "Order not found"),
        "user_id": str(user["_id"]),
    })
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if order["status"] not in ("pending", "payment_failed"):
        raise HTTPException(status_code=400, detail=f"Order is already {order['status']}")
    if body.amount is not None and to_cents(body.amount) != order["total"]:
        raise HTTPException(status_code=400, detail="Amount does not match order total")
    return order


def order_id_from(metadata: Optional[dict]) -> Optional[str]:
    return (metadata or {}).get("order_id")


# ------
# Stripe
# ------

def create_stripe_payment_intent(order: dict, user: dict):
    return stripe.PaymentIntent.create(
        api_key=config.STRIPE_SECRET_KEY,
        amount=order["total"],
        currency=config.CURRENCY.lower(),
        metadata={"order_id": str(order["_id"]), "user_id": str(user["_id"])},
        automatic_payment_methods={"enabled": True},
    )


@router.post("/stripe/create-payment-intent")
def stripe_create_payment_intent(body: PaymentRequest, user: dict = Depends(get_current_user), db=Depends(get_db)):
    order = payable_order(db, body, user)
    try:
        intent = create_stripe_payment_intent(order, user)
    except stripe.StripeError as e:
        logger.error(f"Stripe rejected payment intent for order {order['order_number']}: {e}")
        raise HTTPException(status_code=502, detail="Failed to create payment intent")

    db["order"].update_one(
        {"_id": order["_id"]},
        {"$set": {"stripe_payment_intent_id": intent.id, "payment_method": "stripe", "updated_at": now()}},
    )
    return ok({"client_secret": intent.client_secret, "payment_intent_id": intent.id})


def handle_stripe_event(db, event: dict) -> None:
    event_type = event.get("type")
    intent = (event.get("data") or {}).get("object") or {}
    if event_type not in ("payment_intent.succeeded", "payment_intent.payment_failed"):
        logger.info(f"Unhandled Stripe event type {event_type}")
        return

    order_id = order_id_from(intent.get("metadata"))
    if not order_id:
        logger.error(f"No order id in metadata of payment intent {intent.get('id')}")
        return

    if event_type == "payment_intent.succeeded":
        order = mark_order_paid(db, order_id, stripe_payment_intent_id=intent.get("id"))
    else:
        order = mark_payment_failed(db, order_id)
    if order is None:
        logger.error(f"Stripe event {event_type} names unknown order {order_id}")


@router.post("/stripe/webhook")
async def stripe_webhook(request: Request, stripe_signature: Optional[str] = Header(default=None),
                         db=Depends(get_db)):
    if not config.STRIPE_WEBHOOK_SECRET:
        logger.error("STRIPE_WEBHOOK_SECRET not set; rejecting Stripe webhook")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")
    try:
        payload = (await request.body()).decode("utf-8")
        stripe.WebhookSignature.verify_header(payload, stripe_signature or "", config.STRIPE_WEBHOOK_SECRET)
        event = json.loads(payload)
    except (stripe.SignatureVerificationError, ValueError) as e:
        logger.warning(f"Stripe webhook signature verification failed: {e}")
        raise HTTPException(status_code=400, detail=f"Webhook Error: {e}")

    try:
        await run_in_threadpool(handle_stripe_event, db, event)
    except HTTPException as e:
        logger.error(f"Stripe webhook rejected: {e.detail}")
    except Exception:
        logger.exception("Error processing Stripe webhook")
        raise HTTPException(status_code=500, detail="Webhook processing failed")
    return {"received": True}


# ----------------
# Coinbase Commerce
# ----------------

def create_coinbase_charge(order: dict, user: dict) -> dict:
    response = httpx.post(
        f"{config.COINBASE_API_URL}/charges",
        json={
            "name": f"Order {order['order_number']}",
            "description": f"Payment for order {order['order_number']}",
            "local_price": {"amount": f"{order['total'] / 100:.2f}", "currency": config.CURRENCY},
            "pricing_type": "fixed_price",
            "metadata": {"order_id": str(order["_id"]), "user_id": str(user["_id"])},
        },
        headers={
            "X-CC-Api-Key": config.COINBASE_API_KEY,
            "X-CC-Version": config.COINBASE_API_VERSION,
        },
        timeout=15.0,
    )
    response.raise_for_status()
    return response.json()["data"]


@router.post("/coinbase/create-invoice")
def coinbase_create_invoice(body: PaymentRequest, user: dict = Depends(get_current_user), db=Depends(get_db)):
    order = payable_order(db, body, user)
    try:
        charge = create_coinbase_charge(order, user)
    except (httpx.HTTPError, KeyError) as e:
        logger.error(f"Coinbase charge failed for order {order['order_number']}: {e}")
        raise HTTPException(status_code=502, detail="Failed to create invoice")

    db["order"].update_one(
        {"_id": order["_id"]},
        {"$set": {"coinbase_invoice_id": charge["id"], "payment_method": "coinbase", "updated_at": now()}},
    )
    return ok({
        "invoice_id": charge["id"],
        "checkout_url": charge.get("hosted_url"),
        "expires_at": charge.get("expires_at"),
    })


def coinbase_signature(payload: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def handle_coinbase_event(db, event: dict) -> None:
    event_type = event.get("type")
    charge = event.get("data") or {}
    if event_type not in ("charge:confirmed", "charge:failed"):
        logger.info(f"Unhandled Coinbase event type {event_type}")
        return

    order_id = order_id_from(charge.get("metadata"))
    if not order_id:
        logger.error(f"No order id in metadata of charge {charge.get('id')}")
        return

    if event_type == "charge:confirmed":
        order = mark_order_paid(db, order_id, coinbase_invoice_id=charge.get("id"))
    else:
        order = mark_payment_failed(db, order_id)
    if order is None:
        logger.error(f"Coinbase event {event_type} names unknown order {order_id}")


@router.post("/coinbase/webhook")
async def coinbase_webhook(request: Request, x_cc_webhook_signature: Optional[str] = Header(default=None),
                           db=Depends(get_db)):
    if not config.COINBASE_WEBHOOK_SECRET:
        logger.error("COINBASE_WEBHOOK_SECRET not set; rejecting Coinbase webhook")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")
    payload = await request.body()
    expected = coinbase_signature(payload, config.COINBASE_WEBHOOK_SECRET)
    if not x_cc_webhook_signature or not hmac.compare_digest(x_cc_webhook_signature, expected):
        raise HTTPException(status_code=400, detail="Invalid signature")

    try:
        body = json.loads(payload)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    # Coinbase wraps the event: {"event": {"type": ..., "data": {...}}}
    event = body.get("event", body)

    try:
        await run_in_threadpool(handle_coinbase_event, db, event)
    except HTTPException as e:
        logger.error(f"Coinbase webhook rejected: {e.detail}")
    except Exception:
        logger.exception("Error processing Coinbase webhook")
        raise HTTPException(status_code=500, detail="Webhook processing failed")
    return {"received": True}
