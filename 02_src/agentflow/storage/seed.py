"""Fixed manufacturing sample data used by the analysts."""

from dataclasses import replace
from datetime import date

from ..logging_config import get_logger
from ..models import MaintenanceLog, ProductionRecord
from .storage import IStorage

logger = get_logger(__name__)


DEMO_PRODUCTION: tuple[ProductionRecord, ...] = (
    # Low production days
    ProductionRecord(
        date=date(2025, 1, 21), production_volume=62, machine_id="M001",
        downtime_minutes=80, defective_bottles=25, operator_id="OP001",
        operator_skill="Novice", raw_material_status="Delayed", delay_minutes=30,
        failure_type="Mechanical", rejection_reason="Quality Issue",
        temperature=22.5, humidity=45.0,
    ),
    ProductionRecord(
        date=date(2025, 3, 14), production_volume=92, machine_id="M002",
        downtime_minutes=60, defective_bottles=10, operator_id="OP002",
        operator_skill="Intermediate", raw_material_status="Available",
        failure_type="Electrical", temperature=23.0, humidity=50.0,
    ),
    ProductionRecord(
        date=date(2025, 2, 10), production_volume=95, machine_id="M003",
        downtime_minutes=70, defective_bottles=15, operator_id="OP003",
        operator_skill="Novice", raw_material_status="Available",
        failure_type="Mechanical", temperature=21.0, humidity=48.0,
    ),
    ProductionRecord(
        date=date(2025, 4, 5), production_volume=98, machine_id="M004",
        downtime_minutes=90, defective_bottles=20, operator_id="OP004",
        operator_skill="Expert", raw_material_status="Delayed", delay_minutes=20,
        failure_type="Material", rejection_reason="Quality Issue",
        temperature=24.0, humidity=55.0,
    ),
    ProductionRecord(
        date=date(2025, 5, 1), production_volume=99, machine_id="M005",
        downtime_minutes=85, defective_bottles=18, operator_id="OP005",
        operator_skill="Intermediate", raw_material_status="Available",
        failure_type="Software", temperature=20.0, humidity=42.0,
    ),
    # Normal production days
    ProductionRecord(
        date=date(2025, 1, 1), production_volume=1300, machine_id="M001",
        downtime_minutes=20, defective_bottles=5, operator_id="OP001",
        operator_skill="Expert", raw_material_status="Available",
        temperature=22.0, humidity=40.0,
    ),
    ProductionRecord(
        date=date(2025, 2, 1), production_volume=1400, machine_id="M002",
        downtime_minutes=15, defective_bottles=3, operator_id="OP002",
        operator_skill="Expert", raw_material_status="Available",
        temperature=23.0, humidity=41.0,
    ),
    ProductionRecord(
        date=date(2025, 3, 1), production_volume=1350, machine_id="M003",
        downtime_minutes=10, defective_bottles=2, operator_id="OP003",
        operator_skill="Intermediate", raw_material_status="Available",
        temperature=21.0, humidity=39.0,
    ),
    ProductionRecord(
        date=date(2025, 4, 1), production_volume=1450, machine_id="M004",
        downtime_minutes=12, defective_bottles=4, operator_id="OP004",
        operator_skill="Expert", raw_material_status="Available",
        temperature=24.0, humidity=43.0,
    ),
    ProductionRecord(
        date=date(2025, 5, 1), production_volume=1500, machine_id="M005",
        downtime_minutes=8, defective_bottles=1, operator_id="OP005",
        operator_skill="Expert", raw_material_status="Available",
        temperature=20.0, humidity=38.0,
    ),
)

DEMO_MAINTENANCE: tuple[MaintenanceLog, ...] = (
    MaintenanceLog(
        machine_id="M001", log_date=date(2025, 1, 21), downtime_minutes=80,
        maintenance_type="Corrective",
        description="Machine M001 required maintenance due to Mechanical failure",
    ),
    MaintenanceLog(
        machine_id="M004", log_date=date(2025, 4, 5), downtime_minutes=90,
        maintenance_type="Corrective",
        description="Machine M004 required maintenance due to Material failure",
    ),
)


async def seed_demo_data(storage: IStorage) -> bool:
    """Load the sample set if no production data exists. Returns True if seeded."""
    if await storage.get_latest_production_date() is not None:
        return False

    # Copies, so the module-level samples never receive storage IDs
    for record in DEMO_PRODUCTION:
        await storage.save_production_record(replace(record, id=None))
    for log in DEMO_MAINTENANCE:
        await storage.save_maintenance_log(replace(log, id=None))

    logger.info(
        "Seeded %s production records and %s maintenance logs",
        len(DEMO_PRODUCTION),
        len(DEMO_MAINTENANCE),
    )
    return True
