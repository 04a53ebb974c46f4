# alumnilink/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from alumnilink import models  # noqa: F401 - register all tables on Base.metadata
from alumnilink.api import mentorship, notification
from alumnilink.config import settings
from alumnilink.database import Base, engine

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="AlumniLink Mentorship API", version="1.0.0")

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(mentorship.router)    # /mentorship/*
app.include_router(notification.router)  # /notifications/*

logger.info("AlumniLink API started (env=%s)", settings.APP_ENV)


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "AlumniLink API is running",
        "version": "1.0.0",
    }
