import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clashzone.database import init_db
from clashzone.routes import bracket

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="ClashZone Bracket API")

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include bracket router
app.include_router(bracket.router, prefix="/api", tags=["bracket"])


@app.on_event("startup")
def on_startup():
    init_db()  # Use centralized init_db() which imports models and creates tables
    paths = sorted({getattr(r, "path", "") for r in app.routes if getattr(r, "path", None)})
    logger.info("Registered %d routes: %s", len(paths), ", ".join(paths))


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint to verify the service is up"""
    return {"app_name": "ClashZone Bracket API", "status": "healthy"}
