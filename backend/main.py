# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import SessionLocal, init_db
from utils.errors import register_exception_handlers
from utils.middleware import setup_middleware
from utils.seed import ensure_default_admin

# Router imports
from routes.auth import router as auth_router
from routes.users import router as users_router
from routes.products import router as products_router
from routes.picos import router as picos_router
from routes.paletizado import router as paletizado_router
from routes.dashboard import router as dashboard_router
from routes.activity import router as activity_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tables and the bootstrap administrator
    init_db()
    db = SessionLocal()
    try:
        ensure_default_admin(db)
    finally:
        db.close()
    logger.info("PalletFlow API started (session backend: %s)", settings.SESSION_BACKEND)
    yield
    logger.info("PalletFlow API shutting down")


app = FastAPI(title="PalletFlow API", version="1.0.0", lifespan=lifespan)

setup_middleware(app)
register_exception_handlers(app)

# Router registration
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(products_router)
app.include_router(picos_router)
app.include_router(paletizado_router)
app.include_router(dashboard_router)
app.include_router(activity_router)

@app.get("/")
def read_root():
    return {"message": "PalletFlow API is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000)
