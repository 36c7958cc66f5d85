from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from discovery.cache.manager import CacheManager
from discovery.database.connection import get_redis
from discovery.routes.search import router as search_router
from discovery.routes.ranks import router as ranks_router
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Fanaara Discovery API",
    version="1.0.0",
    description="Search and ranking engine for people, works, posts, communities and studios"
)

# CORS - allow the frontend in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        os.getenv("FRONTEND_URL", "")
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup_event():
    """Report backing services on startup"""
    redis_client = get_redis()
    if redis_client:
        logger.info("Redis connection established")
    else:
        logger.warning("Redis not available - history persistence and leaderboard cache disabled")

# Include routers
app.include_router(search_router)
app.include_router(ranks_router)

@app.get("/")
def root():
    return {
        "message": "Fanaara Discovery API",
        "version": "1.0.0",
        "status": "running",
        "description": "Search and ranking engine"
    }

@app.get("/health")
def health_check():
    """Health check endpoint for monitoring"""
    redis_client = get_redis()
    cache_status = CacheManager(redis_client).health_check()

    return {
        "status": "healthy",
        "redis": "connected" if redis_client else "disconnected",
        "cache": cache_status,
        "version": "1.0.0",
        "features": {
            "search": True,
            "suggestions": True,
            "leaderboards": True,
            "persistence": bool(redis_client)
        }
    }
