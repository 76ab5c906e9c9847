from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.routers import reservations, availability, webhooks, catalog
from app.config import settings
from app.utils.logging_config import setup_logging
from app.middleware.logging_middleware import log_requests


logger = setup_logging()
logger.info("Application starting...")
app = FastAPI(title=settings.app_name, debug=settings.debug)

app.middleware("http")(log_requests)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reservations.router)
app.include_router(availability.router)
app.include_router(webhooks.router)
app.include_router(catalog.router)

@app.get("/")
def root() -> dict:
        return {"message": "Buchungssystem läuft!", "app": settings.app_name}

@app.get("/health")
def health() -> dict:
        return {"status": "ok"}
