"""FastAPI application serving the sticky review bar."""
from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .app.routes.admin import router as admin_router
from .app.routes.configuration import router as configuration_router
from .app.routes.reviews import router as manual_reviews_router
from .app.routes.widget import router as widget_router
from .app.services import reviews as review_services
from .app.storage.postgres import connect, create_schema

load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_CORS_ORIGINS = ["http://localhost:5173"]

settings = review_services.get_settings()

app = FastAPI(title="Sticky Reviewer API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins) or _DEFAULT_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(widget_router)
app.include_router(manual_reviews_router)
app.include_router(admin_router)
app.include_router(configuration_router)


@app.on_event("startup")
def prepare_storage() -> None:
    if not settings.uses_postgres:
        return
    conn = connect(settings.database_params())
    try:
        create_schema(conn)
    finally:
        conn.close()
    logger.info("Database schema ready", extra={"db_name": settings.db_name})
