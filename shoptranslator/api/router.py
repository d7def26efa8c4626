from fastapi import APIRouter

from shoptranslator.api.routes import health, store, translations, widgets

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(store.router, prefix="/store", tags=["store"])
api_router.include_router(widgets.router, prefix="/widgets", tags=["widgets"])
api_router.include_router(translations.router, prefix="/translations", tags=["translations"])
