"""Manufacturing sample data models."""

from dataclasses import dataclass
from datetime import date


@dataclass
class ProductionRecord:
    """Daily production figures for one machine."""

    date: date
    production_volume: int
    machine_id: str
    downtime_minutes: int = 0
    failure_type: str | None = None
    operator_id: str | None = None
    operator_skill: str | None = None  # "Novice", "Intermediate", "Expert"
    raw_material_status: str | None = None
    delay_minutes: int = 0
    defective_bottles: int = 0
    rejection_reason: str | None = None
    temperature: float | None = None
    humidity: float | None = None
    id: int | None = None


@dataclass
class MaintenanceLog:
    """A maintenance intervention on a machine."""

    machine_id: str
    log_date: date
    downtime_minutes: int
    maintenance_type: str | None = None
    description: str | None = None
    id: int | None = None
