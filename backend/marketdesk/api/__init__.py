from fastapi import APIRouter
from .orders import router as orders_router
from .returns import router as returns_router
from .inventory import router as inventory_router
from .dashboard import router as dashboard_router
from .imports import router as imports_router

api_router = APIRouter()
api_router.include_router(orders_router,    prefix="/orders",    tags=["Orders"])
api_router.include_router(returns_router,   prefix="/returns",   tags=["Returns"])
api_router.include_router(inventory_router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(imports_router,   prefix="/imports",   tags=["Imports"])
