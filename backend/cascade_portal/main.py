# backend/cascade_portal/main.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .core.config import settings
from .forecast.errors import InvalidPeriodError
from .forecast.runner import CompanyLocks
from .store.memory import MemoryForecastStore

# ---- Routers ----
from .api import forecasts, whatif, scenarios

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Cascade Portal API")

# Shared, process-wide state (injected through core/deps.py)
app.state.company_locks = CompanyLocks()
app.state.memory_store = MemoryForecastStore()

# ---------------------------
# CORS (frontend dev servers)
# ---------------------------
DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _resolve_allowed_origins() -> list[str]:
    # settings.CORS_ALLOW_ORIGINS may be a list or a comma separated string
    raw = getattr(settings, "CORS_ALLOW_ORIGINS", None)
    if not raw:
        return DEFAULT_CORS_ORIGINS
    if isinstance(raw, (list, tuple)):
        vals = [str(x).strip().rstrip("/") for x in raw if str(x).strip()]
    else:
        vals = [s.strip().rstrip("/") for s in str(raw).split(",") if s.strip()]
    # a lone "*" with credentials is unsafe: fall back to the dev list
    if len(vals) == 1 and vals[0] == "*":
        return DEFAULT_CORS_ORIGINS
    return vals or DEFAULT_CORS_ORIGINS


ALLOW_ORIGINS = _resolve_allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------
# Error mapping
# ---------------------------
@app.exception_handler(InvalidPeriodError)
async def _invalid_period(request: Request, exc: InvalidPeriodError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(SQLAlchemyError)
async def _storage_unavailable(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Database connection unavailable. Please try again later."},
    )


# ---------------------------
# Health
# ---------------------------
@app.get("/health", tags=["system"])
def health():
    return {"status": "ok", "store": settings.STORE_BACKEND}


# ---------------------------
# Routers
# ---------------------------
app.include_router(forecasts.router)   # list / recalculate
app.include_router(whatif.router)      # what-if
app.include_router(scenarios.router)   # named scenarios
