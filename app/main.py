"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import availability, bookings, facilities, sports
from app.core.config import settings
from app.core.database import init_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Sports Facility Booking API")
    logger.info(f"Debug mode: {settings.DEBUG}")

    await init_db()

    yield

    # Shutdown
    logger.info("Shutting down Sports Facility Booking API")


# Create FastAPI app
app = FastAPI(
    title="Sports Facility Booking API",
    description="Browse sports facilities, check hourly availability and book resources",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers; availability first so /bookings/availability is not
# taken for a booking ID
app.include_router(availability.router)
app.include_router(sports.router)
app.include_router(facilities.router)
app.include_router(bookings.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
