from fastapi import APIRouter

from .routes import catalog, inventory, products, workorders

api_router = APIRouter()
api_router.include_router(catalog.router)
api_router.include_router(inventory.router)
api_router.include_router(products.router)
api_router.include_router(workorders.router)
