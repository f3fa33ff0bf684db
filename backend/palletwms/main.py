import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from palletwms.core import config
from palletwms.core.errors import WarehouseError
from palletwms.services.store import WarehouseStore

# ---- load .env files (backend/.env then repo .env) ----------------------
_loaded = config.load_env_files()
if _loaded:
    print(f"[main] Loaded env files: {', '.join(_loaded)}")
else:
    print("[main] No .env file found next to backend/ or repo root.")

if not config.openai_api_key():
    print("[main] Warning: OPENAI_API_KEY not found; storage suggestions are disabled.")

logging.getLogger("palletwms").setLevel(config.log_level())
logger = logging.getLogger("palletwms.main")

# routers import after .env load
from palletwms.routers import catalog, inventory, locations, picking, reports, upload  # noqa: E402


app = FastAPI(title="Pallet WMS API", version="0.1.0")

# one warehouse session per process; tests swap in a fresh store
app.state.store = WarehouseStore()


# ---- CORS (dev-friendly) ----------------------------------------------
_default_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
origins = sorted(set(_default_origins + config.frontend_origins()))

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=86400,
)


# ---- error mapping ---------------------------------------------------------
@app.exception_handler(WarehouseError)
async def _warehouse_error_handler(request: Request, exc: WarehouseError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    payload = {
        "detail": "Request validation failed",
        "code": "validation_error",
        "errors": exc.errors(),
    }
    # pydantic error contexts may hold exception objects
    return JSONResponse(status_code=422, content=jsonable_encoder(payload, custom_encoder={Exception: str}))


# ---- register routers ------------------------------------------------------
app.include_router(locations.router)
app.include_router(catalog.router)
app.include_router(inventory.router)
app.include_router(picking.router)
app.include_router(reports.router)
app.include_router(upload.router)


# ---- simple health check ---------------------------------------------------
@app.get("/health")
async def health() -> dict[str, str]:
    """Process liveness probe."""
    return {"status": "ok"}
