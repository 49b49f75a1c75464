from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.api import api_router
from app.core.config import settings
from app.core.exceptions import setup_exception_handlers
from app.core.logger import logger
from app.db.pool import ConnectionPool, PoolConfig
from app.db.session import create_db_and_tables
from app.middleware.log_middleware import LogMiddleware

@asynccontextmanager
async def lifespan(app: FastAPI):
    pool = ConnectionPool.open(PoolConfig.from_settings(settings))
    app.state.pool = pool
    if settings.DB_CREATE_TABLES:
        await create_db_and_tables(pool)
    logger.info(f"{settings.PROJECT_NAME} started with pool capacity {pool.capacity}")
    yield
    await pool.close_all()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LogMiddleware)

setup_exception_handlers(app)

@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

app.include_router(api_router, prefix=settings.API_PREFIX)

# Front-end bundle, when one has been built next to the API
if Path(settings.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
