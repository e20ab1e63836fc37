"""Per-category analysts that compute the final result from sample data."""

import calendar
import math
import re
from dataclasses import asdict
from datetime import date
from typing import Any, Protocol

from ..logging_config import get_logger
from ..models import AgentResponse, Category, ChartSeries, ProductionRecord
from ..storage import IStorage

logger = get_logger(__name__)

LOW_PRODUCTION_THRESHOLD = 800
TOP_DAYS = 5
DEFAULT_TREND_MONTHS = 6
MAX_TREND_MONTHS = 120
AVERAGE_DAILY_CAPACITY = 1200

_MONTHS_PATTERN = re.compile(r"(\d+)\s*months?")


class IAnalyst(Protocol):
    """Produces the result for one category."""

    @property
    def category(self) -> Category:
        """Category this analyst answers."""
        ...

    async def analyze(self, query: str) -> AgentResponse:
        """Compute the result for a query."""
        ...


def months_before(anchor: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to month end."""
    year, month_index = divmod(anchor.month - 1 - months, 12)
    year += anchor.year
    month = month_index + 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def parse_months(query: str, default: int = DEFAULT_TREND_MONTHS) -> int:
    match = _MONTHS_PATTERN.search(query.lower())
    if not match:
        return default
    return min(max(1, int(match.group(1))), MAX_TREND_MONTHS)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _record_dict(record: ProductionRecord) -> dict[str, Any]:
    data = asdict(record)
    data["date"] = record.date.isoformat()
    return data


class DescriptiveAnalyst:
    """Answers what happened: low days and monthly trends."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    @property
    def category(self) -> Category:
        return Category.DESCRIPTIVE

    async def analyze(self, query: str) -> AgentResponse:
        lowered = query.lower()

        if "low production" in lowered and "top 5 days" in lowered:
            return await self._low_production_days()
        if "trend" in lowered:
            return await self._monthly_trend(parse_months(lowered))
        if "top" in lowered and "low production" in lowered:
            return await self._lowest_days()
        return await self._monthly_trend(parse_months(lowered))

    async def _low_production_days(self) -> AgentResponse:
        sql_query = (
            "SELECT DATE(date) AS date, production_volume, machine_id,\n"
            "       operator_id, downtime_minutes, defective_bottles\n"
            "FROM production_data\n"
            f"WHERE production_volume < {LOW_PRODUCTION_THRESHOLD}\n"
            "ORDER BY production_volume ASC\n"
            f"LIMIT {TOP_DAYS}"
        )
        records = await self._storage.get_lowest_production_days(
            limit=TOP_DAYS, below=LOW_PRODUCTION_THRESHOLD
        )

        if not records:
            return AgentResponse(
                text="There are no days with production volume below the threshold in your data.",
                category=Category.DESCRIPTIVE,
                sql_query=sql_query,
                data=[],
                insights=["No low production days found in the data."],
            )

        data = [
            {
                "date": r.date.isoformat(),
                "production": r.production_volume,
                "machine": r.machine_id,
                "operator": r.operator_id,
                "downtime": r.downtime_minutes,
                "defects": r.defective_bottles,
            }
            for r in records
        ]
        worst = data[0]
        average = round_half_up(sum(d["production"] for d in data) / len(data))

        text = (
            f"I've identified the top {len(data)} days with the lowest production levels "
            "in our manufacturing history. These dates show significantly reduced output "
            f"compared to our average production capacity of {AVERAGE_DAILY_CAPACITY:,} "
            f"units per day. The analysis reveals that {worst['date']} had the lowest "
            f"production at just {worst['production']} units"
        )
        if len(data) > 1:
            text += f", followed by {data[1]['date']} with {data[1]['production']} units"
        text += "."

        return AgentResponse(
            text=text,
            category=Category.DESCRIPTIVE,
            sql_query=sql_query,
            data=data,
            chart_series=ChartSeries(
                label="Production Volume",
                labels=[d["date"] for d in data],
                values=[d["production"] for d in data],
                kind="bar",
            ),
            insights=[
                f"Lowest production day: {worst['date']} with {worst['production']} units",
                f"Average production on low days: {average} units",
                f"Most affected machine: {worst['machine']}",
                f"Total downtime on worst day: {worst['downtime']} minutes",
            ],
        )

    async def _monthly_trend(self, months: int) -> AgentResponse:
        sql_query = (
            "SELECT DATE_FORMAT(date, '%Y-%m') AS month,\n"
            "       SUM(production_volume) AS total_production,\n"
            "       AVG(production_volume) AS avg_daily_production\n"
            "FROM production_data\n"
            f"WHERE date >= DATE_SUB(NOW(), INTERVAL {months} MONTH)\n"
            "GROUP BY DATE_FORMAT(date, '%Y-%m')\n"
            "ORDER BY month ASC"
        )

        # The window ends at the latest recorded day, not the wall clock
        anchor = await self._storage.get_latest_production_date()
        records = []
        if anchor is not None:
            records = await self._storage.get_production_data(
                start=months_before(anchor, months), end=anchor
            )

        if not records:
            return AgentResponse(
                text=f"No production data was recorded in the last {months} months.",
                category=Category.DESCRIPTIVE,
                sql_query=sql_query,
                data=[],
            )

        totals: dict[str, list[int]] = {}
        for record in records:
            month = record.date.strftime("%Y-%m")
            totals.setdefault(month, []).append(record.production_volume)

        data = [
            {
                "month": month,
                "total_production": sum(volumes),
                "avg_daily_production": round_half_up(sum(volumes) / len(volumes)),
            }
            for month, volumes in sorted(totals.items())
        ]

        peak = max(data, key=lambda d: d["total_production"])
        lowest = min(data, key=lambda d: d["total_production"])
        average_daily = round_half_up(
            sum(d["avg_daily_production"] for d in data) / len(data)
        )

        return AgentResponse(
            text=f"Below is the production data for the last {months} months.",
            category=Category.DESCRIPTIVE,
            sql_query=sql_query,
            data=data,
            chart_series=ChartSeries(
                label="Production Volume (Units)",
                labels=[
                    date.fromisoformat(f"{d['month']}-01").strftime("%b %Y") for d in data
                ],
                values=[d["total_production"] for d in data],
                kind="line",
            ),
            insights=[
                f"Peak Production: {peak['total_production']:,} units in {peak['month']}",
                f"Lowest Production: {lowest['total_production']:,} units in {lowest['month']}",
                f"Average Daily Production: {average_daily:,} units",
            ],
        )

    async def _lowest_days(self) -> AgentResponse:
        sql_query = (
            "SELECT date, production_volume, machine_id\n"
            "FROM production_data\n"
            "ORDER BY production_volume ASC\n"
            f"LIMIT {TOP_DAYS}"
        )
        records = await self._storage.get_lowest_production_days(limit=TOP_DAYS)

        if not records:
            return AgentResponse(
                text="There is no production data to rank yet.",
                category=Category.DESCRIPTIVE,
                sql_query=sql_query,
                data=[],
            )

        data = [
            {
                "date": r.date.isoformat(),
                "production_volume": r.production_volume,
                "machine_id": r.machine_id,
            }
            for r in records
        ]
        worst = data[0]
        average = round_half_up(sum(d["production_volume"] for d in data) / len(data))

        return AgentResponse(
            text=(
                f"Here are the top {len(data)} days with the lowest production volumes. "
                "These dates represent significant underperformance that may require "
                "further investigation to identify root causes and prevent future "
                "occurrences."
            ),
            category=Category.DESCRIPTIVE,
            sql_query=sql_query,
            data=data,
            chart_series=ChartSeries(
                label="Production Volume (Units)",
                labels=[d["date"] for d in data],
                values=[d["production_volume"] for d in data],
                kind="bar",
            ),
            insights=[
                f"Lowest production day: {worst['date']} with {worst['production_volume']} units",
                f"Most affected machine: {worst['machine_id']}",
                f"Average low production: {average} units",
            ],
        )


CAUSE_LABELS = {
    "machine_downtime": "machine downtime",
    "material_delays": "material delays",
    "quality_issues": "quality issues",
    "operator_issues": "operator issues",
}


class DiagnosticAnalyst:
    """Answers why production was low on the worst days."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    @property
    def category(self) -> Category:
        return Category.DIAGNOSTIC

    async def analyze(self, query: str) -> AgentResponse:
        records = await self._storage.get_lowest_production_days(limit=TOP_DAYS)

        dates = ",".join(f"'{r.date.isoformat()}'" for r in records)
        sql_query = (
            "SELECT date, production_volume, machine_id, downtime_minutes,\n"
            "       operator_skill, raw_material_status, defective_bottles\n"
            "FROM production_data\n"
            f"WHERE date IN ({dates})"
        )

        if not records:
            return AgentResponse(
                text="There is no production data to diagnose yet.",
                category=Category.DIAGNOSTIC,
                sql_query=sql_query,
                data=[],
            )

        causes = {key: 0 for key in CAUSE_LABELS}
        for record in records:
            if record.downtime_minutes > 60:
                causes["machine_downtime"] += 1
            if record.delay_minutes > 0:
                causes["material_delays"] += 1
            if record.defective_bottles > 20:
                causes["quality_issues"] += 1
            if record.operator_skill == "Novice":
                causes["operator_issues"] += 1

        analyzed = len(records)
        primary, primary_count = max(causes.items(), key=lambda item: item[1])

        text = (
            "Through detailed diagnostic analysis, I've identified the main contributing "
            "factors to low production days. "
        )
        if primary_count > 0:
            text += (
                f"The primary cause appears to be {CAUSE_LABELS[primary]} affecting "
                f"{primary_count} out of {analyzed} analyzed days. This represents a "
                "significant opportunity for improvement through targeted interventions."
            )
        else:
            text += f"No single factor stood out across the {analyzed} analyzed days."

        return AgentResponse(
            text=text,
            category=Category.DIAGNOSTIC,
            sql_query=sql_query,
            data=[_record_dict(r) for r in records],
            insights=[
                f"Machine downtime affected {causes['machine_downtime']} out of {analyzed} low production days",
                f"Material delays contributed to {causes['material_delays']} instances",
                f"Quality issues were present in {causes['quality_issues']} cases",
                f"Operator skill level was a factor in {causes['operator_issues']} instances",
            ],
        )


RECOMMENDATIONS = (
    "Implement predictive maintenance scheduling for high-downtime machines",
    "Increase operator training programs to reduce skill-related production issues",
    "Optimize raw material inventory management to prevent delays",
    "Establish quality control checkpoints to reduce defective output",
    "Consider equipment upgrades for machines with frequent failures",
)


class PrescriptiveAnalyst:
    """Answers what to do, from maintenance history."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    @property
    def category(self) -> Category:
        return Category.PRESCRIPTIVE

    async def analyze(self, query: str) -> AgentResponse:
        sql_query = (
            "SELECT machine_id, COUNT(*) AS incidents, SUM(downtime_minutes) AS total_downtime\n"
            "FROM maintenance_logs\n"
            "WHERE log_date >= DATE_SUB(NOW(), INTERVAL 6 MONTH)\n"
            "GROUP BY machine_id\n"
            "ORDER BY total_downtime DESC"
        )
        logs = await self._storage.get_maintenance_logs()

        stats: dict[str, dict[str, int]] = {}
        for log in logs:
            machine = stats.setdefault(log.machine_id, {"incidents": 0, "total_downtime": 0})
            machine["incidents"] += 1
            machine["total_downtime"] += log.downtime_minutes

        data = sorted(
            (
                {"machine_id": machine_id, **machine}
                for machine_id, machine in stats.items()
            ),
            key=lambda d: d["total_downtime"],
            reverse=True,
        )

        insights = [f"{len(stats)} machines require maintenance attention"]
        if logs:
            total_downtime = sum(log.downtime_minutes for log in logs)
            insights.append(
                f"Average downtime per incident: {round_half_up(total_downtime / len(logs))} minutes"
            )
            text = (
                f"Maintenance history shows {len(stats)} machines with recurring downtime "
                f"totalling {total_downtime:,} minutes. The recommendations below focus on "
                "preventing the failures behind our lowest production days."
            )
        else:
            text = (
                "No maintenance history is on record, so the recommendations below are "
                "general practices for reducing production losses."
            )
        insights.append("Potential production increase: 15-25% through optimized maintenance")

        chart = None
        if data:
            chart = ChartSeries(
                label="Downtime (Minutes)",
                labels=[d["machine_id"] for d in data],
                values=[d["total_downtime"] for d in data],
                kind="bar",
            )

        return AgentResponse(
            text=text,
            category=Category.PRESCRIPTIVE,
            sql_query=sql_query,
            data=data,
            chart_series=chart,
            insights=insights,
            recommendations=list(RECOMMENDATIONS),
        )
