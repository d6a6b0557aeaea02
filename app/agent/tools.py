"""
Tool definitions advertised to the chat layer.

The chat layer registers the banking SDK's own tools alongside the custom
analytics tools served by this service. Input schemas follow the JSON
Schema subset used for LLM tool calling.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

# Provided by the banking SDK; listed so the agent config is complete.
BANKING_TOOLS: List[str] = [
    "get_balance",
    "get_savings_balance",
    "get_vault_rates",
    "get_transactions",
    "get_profile",
    "search_users",
    "send_money",
    "deposit_savings",
    "withdraw_savings",
]

CONFIRMATION_REQUIRED_TOOLS: List[str] = ["send_money", "deposit_savings", "withdraw_savings"]


class ToolDefinition(BaseModel):
    name: str
    description: str
    input_schema: Dict[str, Any] = Field(default_factory=dict)
    endpoint: str


def _object_schema(properties: Dict[str, Dict[str, str]]) -> Dict[str, Any]:
    return {"type": "object", "properties": properties}


ANALYTICS_TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name="analyze_spending",
        description=(
            "Analyze the user's spending patterns over a specified time period. "
            "Returns insights about spending velocity, categories, and trends."
        ),
        input_schema=_object_schema({
            "days": {"type": "integer", "description": "Number of days to analyze (default: 30)"},
            "use_csv": {
                "type": "boolean",
                "description": "Use local CSV file instead of API (for testing, default: false)",
            },
        }),
        endpoint="/api/v1/tools/analyze_spending",
    ),
    ToolDefinition(
        name="analyze_money_personality",
        description=(
            "Discover your Money Personality - a psychological profile of your spending "
            "and saving behaviors. Reveals behavioral patterns, triggers, and personalized "
            "strategies."
        ),
        input_schema=_object_schema({
            "use_csv": {
                "type": "boolean",
                "description": "Use local CSV file instead of API (for testing, default: false)",
            },
        }),
        endpoint="/api/v1/tools/analyze_money_personality",
    ),
    ToolDefinition(
        name="get_csv_transactions",
        description=(
            "Read transactions from the local transactions.csv file. Use this for testing "
            "when API is unavailable or you want to use demo data."
        ),
        input_schema=_object_schema({
            "limit": {
                "type": "integer",
                "description": "Maximum number of transactions to return (default: 50)",
            },
        }),
        endpoint="/api/v1/tools/get_csv_transactions",
    ),
]


def tool_names() -> List[str]:
    return BANKING_TOOLS + [tool.name for tool in ANALYTICS_TOOLS]
