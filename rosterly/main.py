import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rosterly.api.routes import employees, establishments, schedules
from rosterly.core.config import settings
from rosterly.db.database import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"Rosterly API started ({settings.ENV})")
    yield


app = FastAPI(title="Rosterly API", version="0.1.0", lifespan=lifespan)

app.include_router(establishments.router, prefix="/api/v1")
app.include_router(employees.router, prefix="/api/v1")
app.include_router(schedules.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "ok"}
