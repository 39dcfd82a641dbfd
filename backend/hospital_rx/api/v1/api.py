"""Module: api."""

# backend/hospital_rx/api/v1/api.py
from fastapi import APIRouter

# Core operational routes (health/auth).
from hospital_rx.api.v1.routes.health import router as health_router
from hospital_rx.api.v1.routes.auth import router as auth_router

# Domain routes for the prescription lifecycle and pharmacy dispatch.
from hospital_rx.api.v1.routes.prescriptions import router as prescriptions_router
from hospital_rx.api.v1.routes.pharmacies import router as pharmacies_router


api_router = APIRouter()

# Register operational endpoints first for service-level concerns.
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])

# Register business/domain endpoints consumed by the application UI.
api_router.include_router(prescriptions_router, prefix="/prescriptions", tags=["prescriptions"])
api_router.include_router(pharmacies_router, prefix="/pharmacies", tags=["pharmacies"])
