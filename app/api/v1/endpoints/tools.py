import logging
import time
from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime, timezone

from app.core.config import settings
from app.core.exceptions import AnalyticsError, InsufficientDataError
from app.agent.tools import ANALYTICS_TOOLS, BANKING_TOOLS, ToolDefinition
from app.analytics.records import parse_records
from app.analytics.spending_analyzer import SpendingAnalyzer
from app.analytics.personality import build_profile
from app.analytics.metrics import metrics
from app.services.transactions import get_transactions, load_transactions_from_csv

logger = logging.getLogger(__name__)
router = APIRouter()

TOOLS_PATH_PREFIX = "/api/v1/tools/"


class ToolResult(BaseModel):
    """Envelope returned by every analytics tool."""
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class AnalyzeSpendingRequest(BaseModel):
    days: int = Field(
        default=settings.DEFAULT_ANALYSIS_DAYS,
        ge=0,
        description="Number of days to analyze (0 means the default of 30)"
    )
    use_csv: bool = Field(default=False, description="Use local CSV file instead of API")


class MoneyPersonalityRequest(BaseModel):
    use_csv: bool = Field(default=False, description="Use local CSV file instead of API")


class CsvTransactionsRequest(BaseModel):
    limit: int = Field(
        default=settings.CSV_DEFAULT_LIMIT,
        ge=0,
        description="Maximum number of transactions to return (0 means the default of 50)"
    )


class ToolCatalogResponse(BaseModel):
    tools: List[ToolDefinition]
    banking_tools: List[str]


def _data_source(use_csv: bool) -> Dict[str, bool]:
    return {"csv": use_csv, "api": not use_csv}


def _finish(tool: str, request: Request, started: float, result: ToolResult) -> ToolResult:
    metrics.record_invocation(
        tool=tool,
        processing_time=time.perf_counter() - started,
        success=result.success,
        user_id=getattr(request.state, "user_id", None),
    )
    if not result.success:
        logger.warning(f"Tool {tool} failed: {result.error}")
    return result


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


async def tool_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed tool input as an unsuccessful tool result."""
    if not request.url.path.startswith(TOOLS_PATH_PREFIX):
        return await request_validation_exception_handler(request, exc)

    tool = request.url.path.rstrip("/").rsplit("/", 1)[-1]
    result = _finish(
        tool, request, time.perf_counter(),
        ToolResult(success=False, error=f"invalid input: {_describe_validation_errors(exc)}"),
    )
    return JSONResponse(status_code=200, content=jsonable_encoder(result))


@router.get(
    "",
    response_model=ToolCatalogResponse,
    summary="List analytics tools",
    description="Tool definitions the chat layer registers next to the banking tools"
)
async def list_tools():
    return ToolCatalogResponse(tools=ANALYTICS_TOOLS, banking_tools=BANKING_TOOLS)


@router.get(
    "/status",
    summary="Tool service status",
    description="Returns the operational status and invocation metrics of the analytics tools"
)
async def tools_status():
    """Get service status and metrics."""
    return {
        "status": "operational",
        "service": "Analytics Tools",
        "version": settings.VERSION,
        "features": {tool.name: "available" for tool in ANALYTICS_TOOLS},
        "metrics": metrics.get_stats(),
        "configuration": {
            "default_analysis_days": settings.DEFAULT_ANALYSIS_DAYS,
            "personality_min_transactions": settings.PERSONALITY_MIN_TRANSACTIONS,
            "ledger_fetch_limit": settings.LEDGER_FETCH_LIMIT,
            "csv_path": settings.TRANSACTIONS_CSV_PATH,
        }
    }


@router.post(
    "/analyze_spending",
    response_model=ToolResult,
    summary="Analyze spending patterns",
    description="Totals, cash flow, spending velocity and top categories over a window of days"
)
async def analyze_spending(payload: AnalyzeSpendingRequest, request: Request):
    """
    Analyze the user's spending.

    Transactions are read from the ledger API with the caller's token, or
    from the local CSV file when ``use_csv`` is set.
    """
    started = time.perf_counter()
    days = payload.days or settings.DEFAULT_ANALYSIS_DAYS

    try:
        raw_transactions = await get_transactions(
            payload.use_csv, getattr(request.state, "access_token", None)
        )
    except AnalyticsError as e:
        return _finish("analyze_spending", request, started, ToolResult(success=False, error=str(e)))

    records = parse_records(raw_transactions)
    report = SpendingAnalyzer().analyze(records, days)

    logger.info(
        f"Spending analysis over {days} days: {len(records)} transactions, "
        f"velocity={report.velocity}"
    )

    return _finish("analyze_spending", request, started, ToolResult(
        success=True,
        data={
            "period_days": days,
            "total_transactions": len(records),
            "analysis": report.model_dump(exclude_none=True),
            "data_source": _data_source(payload.use_csv),
            "generated_at": datetime.now(timezone.utc).isoformat(),
        },
    ))


@router.post(
    "/analyze_money_personality",
    response_model=ToolResult,
    summary="Discover the user's Money Personality",
    description="Scores behavioural metrics and matches them to a spending archetype"
)
async def analyze_money_personality(payload: MoneyPersonalityRequest, request: Request):
    started = time.perf_counter()

    try:
        raw_transactions = await get_transactions(
            payload.use_csv, getattr(request.state, "access_token", None)
        )
        profile = build_profile(parse_records(raw_transactions))
    except InsufficientDataError as e:
        logger.info(f"Personality analysis skipped: {e.actual} of {e.required} transactions")
        return _finish(
            "analyze_money_personality", request, started,
            ToolResult(success=False, error=str(e)),
        )
    except AnalyticsError as e:
        return _finish(
            "analyze_money_personality", request, started,
            ToolResult(success=False, error=str(e)),
        )

    data = profile.to_tool_payload()
    data["data_source"] = _data_source(payload.use_csv)
    return _finish("analyze_money_personality", request, started, ToolResult(success=True, data=data))


@router.post(
    "/get_csv_transactions",
    response_model=ToolResult,
    summary="Read demo transactions",
    description="Reads transactions from the local CSV file for offline testing"
)
async def get_csv_transactions(payload: CsvTransactionsRequest, request: Request):
    started = time.perf_counter()
    limit = payload.limit or settings.CSV_DEFAULT_LIMIT

    try:
        transactions = load_transactions_from_csv()
    except AnalyticsError as e:
        return _finish(
            "get_csv_transactions", request, started,
            ToolResult(success=False, error=f"failed to load transactions from CSV: {e}"),
        )

    transactions = transactions[:limit]
    return _finish("get_csv_transactions", request, started, ToolResult(
        success=True,
        data={
            "transactions": transactions,
            "count": len(transactions),
            "source": "csv",
            "file": settings.TRANSACTIONS_CSV_PATH,
        },
    ))
