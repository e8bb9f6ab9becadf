"""
Bookstore Storefront - Main FastAPI Application

Single entry point for the cart and catalog API.
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.logging import get_logger
from storefront.routers import cart_router, catalog_router
from storefront.services.database import close_database, init_database

logger = get_logger(__name__)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    await init_database()
    yield
    await close_database()


app = FastAPI(
    title="Bookstore Storefront",
    description="Cart and catalog API for the publisher storefront",
    version="1.0.0",
    lifespan=lifespan,
)

# Credentials are needed for the cart_session_id cookie, so origins are explicit
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cart_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "storefront"}
