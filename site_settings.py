from fastapi import APIRouter, Depends, HTTPException

from auth import require_admin
from database import get_db, now
from responses import ok
from schemas import SiteSettingValue

router = APIRouter()


@router.get("")
def list_settings(db=Depends(get_db)):
    return ok({s["key"]: s.get("value") for s in db["sitesetting"].find({})})


@router.get("/{key}")
def get_setting(key: str, db=Depends(get_db)):
    s = db["sitesetting"].find_one({"key": key})
    if not s:
        raise HTTPException(status_code=404, detail="Setting not found")
    return ok({"key": key, "value": s.get("value")})


@router.put("/{key}")
def set_setting(key: str, body: SiteSettingValue, user: dict = Depends(require_admin), db=Depends(get_db)):
    db["sitesetting"].update_one(
        {"key": key},
        {"$set": {"value": body.value, "updated_at": now()}, "$setOnInsert": {"created_at": now()}},
        upsert=True,
    )
    return ok({"key": key, "value": body.value}, "Setting saved")
