import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument

import email_service
from auth import require_admin
from database import create_document, get_db, get_documents, now, parse_object_id
from responses import ok, paginate, to_str_id
from schemas import ContactMessage, ContactStatusUpdate, NewsletterRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201)
def submit_contact(contact: ContactMessage, db=Depends(get_db)):
    try:
        payload = contact.model_dump()
        payload.update({"status": "new", "priority": "normal"})
        doc = create_document(db, "contactmessage", payload)
    except Exception:
        logger.exception("Error submitting contact form")
        raise HTTPException(status_code=500, detail="Failed to submit contact form")

    # The message is stored; a failed notification must not fail the request
    try:
        email_service.send_contact_form_email(contact.model_dump())
    except Exception:
        logger.exception(f"Error sending contact form email from {contact.email}")

    return ok(to_str_id(doc), "Contact message submitted successfully")


@router.get("/messages")
def list_messages(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[str] = None,
    priority: Optional[str] = None,
    user: dict = Depends(require_admin),
    db=Depends(get_db),
):
    try:
        query = {}
        if status:
            query["status"] = status
        if priority:
            query["priority"] = priority
        total = db["contactmessage"].count_documents(query)
        docs = get_documents(db, "contactmessage", query, sort=[("created_at", -1)],
                             skip=(page - 1) * limit, limit=limit)
        return ok([to_str_id(d) for d in docs], pagination=paginate(page, limit, total))
    except Exception:
        logger.exception("Error fetching contact messages")
        raise HTTPException(status_code=500, detail="Failed to fetch contact messages")


@router.put("/messages/{message_id}/status")
def update_message_status(message_id: str, body: ContactStatusUpdate, user: dict = Depends(require_admin),
                          db=Depends(get_db)):
    doc = db["contactmessage"].find_one_and_update(
        {"_id": parse_object_id(message_id, "Message not found")},
        {"$set": {"status": body.status, "updated_at": now()}},
        return_document=ReturnDocument.AFTER,
    )
    if not doc:
        raise HTTPException(status_code=404, detail="Message not found")
    return ok(to_str_id(doc), "Message status updated successfully")


@router.post("/newsletter")
def subscribe_newsletter(body: NewsletterRequest, db=Depends(get_db)):
    email = body.email.lower()
    existing = db["newslettersubscription"].find_one({"email": email})
    if existing and existing.get("is_active"):
        raise HTTPException(status_code=400, detail="Email is already subscribed")

    try:
        if existing:
            db["newslettersubscription"].update_one(
                {"email": email}, {"$set": {"is_active": True, "created_at": now(), "updated_at": now()}}
            )
        else:
            create_document(db, "newslettersubscription", {"email": email, "is_active": True})
    except Exception:
        logger.exception("Error subscribing to newsletter")
        raise HTTPException(status_code=500, detail="Failed to subscribe to newsletter")

    try:
        email_service.send_newsletter_confirmation(email)
    except Exception:
        logger.exception(f"Error sending newsletter confirmation to {email}")

    return ok(message="Successfully subscribed to newsletter")


@router.post("/newsletter/unsubscribe")
def unsubscribe_newsletter(body: NewsletterRequest, db=Depends(get_db)):
    result = db["newslettersubscription"].update_one(
        {"email": body.email.lower()}, {"$set": {"is_active": False, "updated_at": now()}}
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Email not found in newsletter subscriptions")
    return ok(message="Successfully unsubscribed from newsletter")
