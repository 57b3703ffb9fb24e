import logging
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.middleware.sessions import SessionMiddleware
from damaijiwa.core.config import settings
from damaijiwa.core.database import engine, Base
from damaijiwa.core.exceptions import (
    AppError,
    app_error_handler,
    unhandled_error_handler,
    error_body,
)
from damaijiwa.core.logging_config import setup_logging
from damaijiwa.controllers import auth_controller, chat_controller
from damaijiwa.services.session_service import session_gated_validation_handler
import damaijiwa.models  # noqa: F401  registers tables on Base.metadata

setup_logging()
logger = logging.getLogger("damaijiwa")

Base.metadata.create_all(bind=engine)

STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    version="1.0.0"
)

# Cookie session holding the bound user id
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,
    same_site=settings.session_same_site,
    https_only=settings.session_https_only,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.app_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, session_gated_validation_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

API_PREFIX = settings.api_prefix

# Include routers
app.include_router(auth_controller.router, prefix=API_PREFIX)
app.include_router(chat_controller.router, prefix=API_PREFIX)
app.include_router(auth_controller.callback_router)

# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name}

# Catch-all for unhandled API routes, keeps them from falling through to the client shell
@app.api_route(API_PREFIX + "/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def api_not_found(path: str):
    return JSONResponse(status_code=404, content=error_body("API route not found"))

# Client shell: real files are served as-is, everything else gets index.html
@app.get("/{full_path:path}", include_in_schema=False)
async def client_shell(full_path: str):
    candidate = (STATIC_DIR / full_path).resolve()
    if full_path and candidate.is_file() and STATIC_DIR.resolve() in candidate.parents:
        return FileResponse(candidate)
    return FileResponse(STATIC_DIR / "index.html")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "damaijiwa.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug
    )
