import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from clients.llm import CompletionClient, GroqCompletionClient
from clients.payment_gateway import PaymentGateway, StripePaymentGateway
from db import create_db_and_tables
from exceptions import StorefrontException
from middleware.rate_limit import RateLimiter
from utils.error_handler import build_error_response, handle_service_error, handle_unexpected_error
from web.admin_router import admin_router
from web.cart_router import cart_router
from web.order_router import order_router
from web.product_router import product_router
from web.user_router import user_router

HTTP_ERROR_KINDS = {
    401: "Unauthorized",
    403: "Forbidden",
    404: "NotFound",
    405: "MethodNotAllowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    await create_db_and_tables()
    logging.info("[Startup] Database tables ready")
    if not app.state.completion_client.is_configured:
        logging.warning("[Startup] AI_API_KEY not set, AI search will use keyword fallback")

    yield

    logging.warning("Shutting down..")
    await app.state.redis.aclose()
    logging.warning("Bye!")


def create_app(redis: Redis | None = None,
               completion_client: CompletionClient | None = None,
               payment_gateway: PaymentGateway | None = None) -> FastAPI:
    app = FastAPI(title="Storefront", lifespan=lifespan)

    app.state.redis = redis if redis is not None else Redis.from_url(config.REDIS_URL)
    app.state.rate_limiter = RateLimiter(app.state.redis)
    app.state.completion_client = completion_client if completion_client is not None else GroqCompletionClient()
    app.state.payment_gateway = payment_gateway if payment_gateway is not None else StripePaymentGateway()

    if config.CORS_ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ALLOWED_ORIGINS,
            allow_credentials=False,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Content-Type", "X-User-Id"],
        )
        logging.debug(f"[Startup] CORS middleware enabled for origins: {config.CORS_ALLOWED_ORIGINS}")

    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(product_router)
    app.include_router(user_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for container monitoring."""
        return {"status": "healthy"}

    @app.exception_handler(StorefrontException)
    async def storefront_exception_handler(request: Request, exc: StorefrontException):
        status_code, body = handle_service_error(exc)
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
            message = errors[0].get("msg", "Invalid request")
            if location:
                message = f"{location}: {message}"
        else:
            message = "Invalid request"
        return JSONResponse(status_code=400, content=build_error_response("ValidationError", message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        kind = HTTP_ERROR_KINDS.get(exc.status_code, "HTTPError")
        return JSONResponse(status_code=exc.status_code, content=build_error_response(kind, str(exc.detail)))

    @app.exception_handler(Exception)
    async def exception_handler(request: Request, exc: Exception):
        status_code, body = handle_unexpected_error(exc)
        return JSONResponse(status_code=status_code, content=body)

    return app


def main() -> None:
    uvicorn.run(create_app(), host=config.WEBAPP_HOST, port=config.WEBAPP_PORT)
