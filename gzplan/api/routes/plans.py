"""
Plan evaluation API endpoints.

The engine is stateless: every request carries the complete founder input and
receives the complete evaluation back. Nothing is stored.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List

import pandas as pd
from fastapi import APIRouter

from gzplan.api.schemas import PlanRequest, PlanResponse
from gzplan.core.engine.plan_engine import PlanResult, evaluate_dict
from gzplan.core.money import quantize_cents

logger = logging.getLogger(__name__)

router = APIRouter()


def _table_records(result: PlanResult) -> List[Dict[str, Any]]:
    """Month-by-month table with JSON-safe values."""
    df = result.to_dataframe()
    records = []
    for row in df.to_dict(orient="records"):
        record = {}
        for key, value in row.items():
            if isinstance(value, Decimal):
                record[key] = str(quantize_cents(value))
            elif isinstance(value, pd.Timestamp):
                record[key] = value.date().isoformat()
            else:
                record[key] = value
        records.append(record)
    return records


@router.post("/evaluate", response_model=PlanResponse)
def evaluate_plan(plan: PlanRequest):
    """
    Evaluate a complete business plan.

    Business problems (negative liquidity, late self-sufficiency, unrealistic
    growth) are reported in the response body; the request still succeeds.
    """
    data = plan.model_dump(exclude={"include_table"})
    result = evaluate_dict(data)

    response = result.to_dict()
    response["is_export_ready"] = result.is_export_ready
    response["has_negative_liquidity"] = result.has_negative_liquidity
    if plan.include_table:
        response["table"] = _table_records(result)

    logger.info(
        f"Evaluated plan over {result.projection.horizon} months: "
        f"export ready={result.is_export_ready}, minimum cash={result.projection.minimum_cash}"
    )
    return response


@router.post("/table")
def plan_table(plan: PlanRequest) -> List[Dict[str, Any]]:
    """Only the month-by-month cash-flow table of a plan."""
    result = evaluate_dict(plan.model_dump(exclude={"include_table"}))
    return _table_records(result)
