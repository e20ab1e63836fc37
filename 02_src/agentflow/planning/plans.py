"""Hand-authored step plan templates keyed by category and variant."""

from typing import NamedTuple

from ..models import AgentName, Category, PlanVariant


class StepTemplate(NamedTuple):
    agent: AgentName
    action: str
    delay_ms: int


_ORCH = AgentName.ORCHESTRATOR
_DESC = AgentName.DESCRIPTIVE
_DIAG = AgentName.DIAGNOSTIC
_PRES = AgentName.PRESCRIPTIVE
_RESP = AgentName.RESPONSE

SQL_TOOL = "sql_query_execution_tool"
DATA_SAVING_TOOL = "data_saving_tool"
PYTHON_TOOL = "python_interpreter_tool"

TREND_PLAN: tuple[StepTemplate, ...] = (
    StepTemplate(_ORCH, "Analyzing query structure and intent...", 1000),
    StepTemplate(_ORCH, "Classification: Descriptive Analytics", 1500),
    StepTemplate(_ORCH, "Routing to Descriptive Agent...", 800),
    StepTemplate(_DESC, "Generating SQL query for analysis...", 3000),
    StepTemplate(_DESC, f"Executing query using Tool {SQL_TOOL}...", 2000),
    StepTemplate(_RESP, "Generating data visualization...", 2000),
    StepTemplate(_RESP, "Preparing streaming response...", 1500),
)

LOW_PRODUCTION_PLAN: tuple[StepTemplate, ...] = (
    StepTemplate(_ORCH, "Analyzing query structure and intent...", 1000),
    StepTemplate(_ORCH, "Classification: Descriptive Analytics", 1000),
    StepTemplate(_ORCH, "Routing to Descriptive Agent...", 800),
    StepTemplate(_DESC, "Generating SQL query for analysis...", 3000),
    StepTemplate(_DESC, f"Executing query using Tool {SQL_TOOL}...", 2000),
    StepTemplate(_DESC, "Query executed successfully. Processing results...", 1500),
    StepTemplate(_DESC, "Sending results to Response Generation Agent...", 1000),
    StepTemplate(_RESP, "Analyzing results and patterns...", 1800),
    StepTemplate(_RESP, "Generating data visualization...", 2000),
    StepTemplate(_RESP, "Preparing streaming response...", 1500),
)

ROOT_CAUSE_PLAN: tuple[StepTemplate, ...] = (
    StepTemplate(_ORCH, "Analyzing query structure and intent...", 1000),
    StepTemplate(_ORCH, "Classification: Diagnostic and Prescriptive Analytics", 1000),
    StepTemplate(_ORCH, "Routing to Diagnostic Agent...", 800),
    StepTemplate(
        _DIAG,
        "Diagnostic Agent calling Descriptive agent for Data with question "
        "(For the dates {low_production_dates}, provide data on total production, "
        "machine downtime (with machine IDs and failure types), operator presence "
        "and skill levels, raw material availability and delays, defective bottle "
        "counts with rejection reasons, and environmental conditions like "
        "temperature and humidity.) ...",
        2500,
    ),
    StepTemplate(_DESC, f"Executing query using Tool {SQL_TOOL}...", 3000),
    StepTemplate(_DESC, "Query executed successfully. Processing results...", 1500),
    StepTemplate(_DESC, f"Saving data using Tool {DATA_SAVING_TOOL}...", 1800),
    StepTemplate(_DIAG, f"Performing root cause analysis using Tool {PYTHON_TOOL}...", 3500),
    StepTemplate(
        _PRES,
        "Prescriptive Agent calling Descriptive agent for Data with question "
        "(Get maintenance logs or frequent downtime machines over last 6 months) ...",
        2200,
    ),
    StepTemplate(_DESC, f"Executing query using Tool {SQL_TOOL}...", 3000),
    StepTemplate(_DESC, f"Saving data using Tool {DATA_SAVING_TOOL}...", 1800),
    StepTemplate(_PRES, f"Generating recommendations using Tool {PYTHON_TOOL}...", 3500),
    StepTemplate(_RESP, "Analyzing results and patterns...", 1800),
    StepTemplate(_RESP, "Preparing streaming response...", 1500),
)

PLAN_TEMPLATES: dict[tuple[Category, PlanVariant], tuple[StepTemplate, ...]] = {
    (Category.DESCRIPTIVE, PlanVariant.STANDARD): TREND_PLAN,
    (Category.DESCRIPTIVE, PlanVariant.LOW_PRODUCTION_TOP_DAYS): LOW_PRODUCTION_PLAN,
    (Category.DIAGNOSTIC, PlanVariant.STANDARD): ROOT_CAUSE_PLAN,
    (Category.PRESCRIPTIVE, PlanVariant.STANDARD): ROOT_CAUSE_PLAN,
}

# Placeholder values used when the caller supplies no plan context.
DEFAULT_PLAN_CONTEXT: dict[str, str] = {
    "low_production_dates": "the five lowest production days",
}
