from fastapi import APIRouter

from storefront.app.catalog.router import router as catalog_router
from storefront.app.orders.router import router as orders_router
from storefront.core.authorization.router import authorization_router, me_router

# Create the root API router
api_router = APIRouter()

# Include domain routers
api_router.include_router(me_router, tags=['authorization'])
api_router.include_router(authorization_router, prefix='/authorization', tags=['authorization'])
api_router.include_router(catalog_router, prefix='/catalog', tags=['catalog'])
api_router.include_router(orders_router, prefix='/orders', tags=['orders'])
