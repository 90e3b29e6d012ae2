"""Main v1 router aggregator"""
from fastapi import APIRouter

from app.api.v1 import auth, debts, users

# Create v1 router
api_router = APIRouter()

# Include all v1 routers
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(debts.router)
