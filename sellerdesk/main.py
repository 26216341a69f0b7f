# sellerdesk/main.py
# -----------------------------------------------------------------------------
# FastAPI entry point
# - tables created on startup
# - one error handler renders every SellerDeskError
# - anything else is logged and rendered as a generic 500
# -----------------------------------------------------------------------------
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

import sellerdesk.core.logging  # noqa: F401  configures loguru sinks
from sellerdesk.core.config import settings
from sellerdesk.core.errors import DependencyError, SellerDeskError, ValidationError
from sellerdesk.db.session import init_models
from sellerdesk.routers import auth, calculators, connections, market_research, saved_ads, users


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    logger.info(f"{settings.APP_NAME} started ({settings.ENV})")
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(calculators.router)
app.include_router(connections.router)
app.include_router(market_research.router)
app.include_router(saved_ads.router)


def _render(exc: SellerDeskError) -> JSONResponse:
    message = exc.message
    if isinstance(exc, DependencyError):
        logger.error(f"[{exc.code}] {exc.message}")
        message = DependencyError.message  # internals stay in the log
    body = {"error": exc.code, "message": message, **exc.extra()}
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))


@app.exception_handler(SellerDeskError)
async def sellerdesk_error_handler(request: Request, exc: SellerDeskError):
    return _render(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
        for err in exc.errors()
    ]
    return _render(ValidationError(details=details))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.opt(exception=exc).error(f"[db] {request.method} {request.url.path} failed")
    return _render(DependencyError("database error"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"[unhandled] {request.method} {request.url.path} failed")
    return _render(SellerDeskError())


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
