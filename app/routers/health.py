"""Router exposing basic system endpoints."""
from __future__ import annotations

import logging
from datetime import timezone

from fastapi import APIRouter, HTTPException

from app.database import SessionLocal
from app.services.plan_store import PlanStore


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/status")
async def get_status() -> dict[str, str]:
    """Return a minimal status payload."""
    return {"status": "online"}


@router.get("/storage")
async def get_storage_status() -> dict:
    """
    Report whether a plan is stored and when it was last written.

    Returns:
        dict: {
            "has_plan": bool,
            "weeks": int,
            "last_saved": ISO timestamp or None
        }
    """
    db = SessionLocal()  # Let it fail naturally - FastAPI will handle connection errors

    try:
        store = PlanStore(db)
        plan = store.load_plan()
        last_saved = store.last_saved_at()
        if last_saved is not None and last_saved.tzinfo is None:
            # Stored timestamps are naive UTC
            last_saved = last_saved.replace(tzinfo=timezone.utc)

        return {
            "has_plan": plan is not None,
            "weeks": len(plan.weeks) if plan else 0,
            "last_saved": last_saved.isoformat() if last_saved else None,
        }

    except Exception:
        logger.exception("Storage status check failed")
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to check storage status")
    finally:
        db.close()
