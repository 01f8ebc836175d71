"""
Narrative Graph Service - FastAPI Backend
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import characters, moments, tenant
from config import get_settings, create_query_executor
from middleware.auth import get_current_tenant_optional
from services.errors import ServiceError, Unauthorized

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the pooled graph executor on startup, close it on shutdown"""
    executor = await create_query_executor()
    await executor.initialize_constraints()
    app.state.executor = executor
    logger.info(f"🚀 Narrative graph service started ({settings.environment})")
    try:
        yield
    finally:
        await executor.close()
        app.state.executor = None


app = FastAPI(
    title="Narrative Graph Service",
    description="Tenant-isolated storage for moments, characters and locations",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # The body is parsed before auth dependencies run; identity still wins
    if request.url.path.startswith("/api/") and await get_current_tenant_optional(request) is None:
        return JSONResponse(status_code=Unauthorized.status_code, content={"error": Unauthorized.default_message})
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {problems}"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(moments.router)
app.include_router(characters.router)
app.include_router(characters.locations_router)
app.include_router(tenant.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/health")
async def api_health(request: Request):
    """Round-trip to the graph store"""
    executor = getattr(request.app.state, "executor", None)
    if executor is None or not await executor.verify_connectivity():
        return JSONResponse(status_code=503, content={"error": "Graph store unavailable"})
    return {"status": "ok", "graph": "connected"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
