from fastapi import FastAPI

from .db import engine, Base
from . import models  # noqa: F401  (registers tables on Base)
from .routers.events import router as events_router
from .routers.identifiers import router as identifiers_router
from .routers.read import router as read_router
from asset_rules.settings import LOG_LEVEL
from asset_rules.setup_logging import setup_logging

# --------------------------------------------------------------------
# App bootstrap
# --------------------------------------------------------------------
setup_logging(LOG_LEVEL) # Init Logging

# Create database tables if they don’t exist.
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Asset rules")

# --------------------------------------------------------------------
# Routes
# --------------------------------------------------------------------
@app.get("/healthz")
def health():
    """Simple health check for monitoring."""
    return {"ok": True, "service": "asset-rules", "version": 1}

# Register API routers:
app.include_router(events_router)
app.include_router(identifiers_router)
app.include_router(read_router)
