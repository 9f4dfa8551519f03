from __future__ import annotations

import logging

from fastapi import FastAPI

from vrdb.config import get_settings
from vrdb.api.routes import clouds, findings, health, snapshots

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Value Realization")

app.include_router(health.router, prefix="/api")
app.include_router(clouds.router, prefix="/api")
app.include_router(snapshots.router, prefix="/api")
app.include_router(findings.router, prefix="/api")
