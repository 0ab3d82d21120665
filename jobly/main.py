import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from jobly.config import settings
from jobly.database import build_engine, build_session_factory
from jobly.exceptions import JoblyError
from jobly.middleware import TimingMiddleware
from jobly.routers import companies, jobs

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    engine = build_engine()
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    logger.info("Jobly API started (%s)", settings.APP_ENV)
    yield
    # Shutdown
    await engine.dispose()

app = FastAPI(
    title="Jobly API",
    description="Companies and jobs CRUD backend",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(companies.router)
app.include_router(jobs.router)

@app.exception_handler(JoblyError)
async def jobly_error_handler(request: Request, exc: JoblyError):
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
