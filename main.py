from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
import uvicorn

from app.core.config import settings
from app.core.logging import setup_logging
from app.api.v1.router import api_router
from app.api.v1.endpoints.tools import tool_validation_exception_handler
from app.middleware.security import TokenForwardingMiddleware
from app.middleware.error_handler import ErrorHandlerMiddleware

logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting NeuraPay Analytics Service...")
    if not settings.ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY is not set; the chat layer cannot reach the model")
    logger.info(f"Ledger API configured at {settings.LIMINAL_BASE_URL}")
    logger.info(f"Demo transactions file: {settings.TRANSACTIONS_CSV_PATH}")
    yield
    logger.info("NeuraPay Analytics Service shut down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Analytics tools for the NeuraPay banking assistant",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(TokenForwardingMiddleware)
app.add_middleware(ErrorHandlerMiddleware)
app.add_exception_handler(RequestValidationError, tool_validation_exception_handler)
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "running",
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )
