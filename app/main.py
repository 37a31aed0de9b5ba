# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS, LOG_LEVEL
from .database import Base, engine
from .routers import addresses, admin, auth, bookings, tailors, users

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ────────────────────────────── DATABASE ──────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
    yield
    engine.dispose()

app = FastAPI(
    title="Home Tailoring Booking Service",
    description="Customers book home tailoring appointments, tailors fulfil them, admins oversee both",
    version="1.0.0",
    lifespan=lifespan
)

# ────────────────────────────── CORS ──────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ────────────────────────────── ROUTERS ──────────────────────────────

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(tailors.router)
app.include_router(bookings.router)
app.include_router(addresses.router)
app.include_router(admin.router)


@app.get("/health")
def health():
    return {"status": "ok"}
