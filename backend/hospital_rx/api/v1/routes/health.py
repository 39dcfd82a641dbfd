"""Module: health."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from hospital_rx.api.v1.routes.deps import get_db

router = APIRouter()


# Endpoint: lightweight liveness check for the service.
@router.get("")
def health():
    return {"status": "ok"}


# Endpoint: readiness check that round-trips the database.
@router.get("/db")
def health_db(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "reachable"}
