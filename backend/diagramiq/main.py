# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
import logging
import sentry_sdk
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from diagramiq.database import engine, Base
from diagramiq.routers import diagram_stats

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Sentry for error monitoring
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
        environment=os.getenv("ENVIRONMENT", "development"),
    )

# Create database tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    if not os.getenv("JWT_SECRET"):
        logger.warning("JWT_SECRET not set - supervisor endpoints will answer 500 until it is configured")
    logger.info("diagramiq API started")

    yield  # Application runs here

    logger.info("Shutting down...")

# OpenAPI tag metadata for organized documentation
tags_metadata = [
    {
        "name": "diagram-stats",
        "description": "Per-diagram performance analytics for the supervisor dashboard. **Requires supervisor access.**",
    },
]

app = FastAPI(
    title="diagramiq API",
    description="""
## diagramiq Diagram Analytics

Statistics over students' learning and exam sessions on labelled diagrams.

### Report sections
- **KPIs** - exam average, learning accuracy, mastery and at-risk rates
- **Trends, histogram, scatter** - daily series and score distributions
- **Hotspots and item quality** - hardest questions, discrimination, claims
- **Distractors, learning curves, reliability, drift**
    """,
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=tags_metadata,
)

# SECURITY: Explicitly list allowed origins - no wildcards
ALLOWED_ORIGINS = [
    "http://localhost:3000",  # Dashboard dev server
    "http://localhost:5173",  # Vite dev server
]

# Allow additional origins from environment (for preview deploys)
extra_origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
if extra_origins:
    ALLOWED_ORIGINS.extend([o.strip() for o in extra_origins.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept"],
)

# Include routers
app.include_router(diagram_stats.router)  # Supervisor diagram statistics


@app.get("/")
def root():
    return {
        "message": "diagramiq API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
