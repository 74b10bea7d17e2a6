"""Seed script to populate the database with sample units, readings and an admin."""

from datetime import datetime
from decimal import Decimal

from condoflow.core.database import Base, SessionLocal, engine
from condoflow.models.enums import ReadingStatus, ResidentRole, UtilityType
from condoflow.models.reading import Reading
from condoflow.models.unit import Unit
from condoflow.models.user import User
from condoflow.services.auth import get_password_hash

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"

UNITS = [
    ("101", "A", "Roberto Silva", ResidentRole.PROPRIETARIO),
    ("102", "A", "Ana Clara", ResidentRole.INQUILINO),
    ("103", "A", "Vago", ResidentRole.PROPRIETARIO),
    ("COND. AB", "", "Condomínio", ResidentRole.PROPRIETARIO),
]

# (unit number, type, previous, current, date)
READINGS = [
    ("101", UtilityType.WATER, "10", "12.5", datetime(2023, 9, 5, 14, 30)),
    ("101", UtilityType.GAS, "3.0", "4.25", datetime(2023, 9, 5, 14, 35)),
    ("102", UtilityType.WATER, "21.5", "23.7", datetime(2023, 9, 6, 9, 15)),
    ("102", UtilityType.GAS, "19.3", "20.1", datetime(2023, 9, 6, 9, 20)),
    ("101", UtilityType.WATER, "12.5", "14.2", datetime(2023, 10, 2, 11, 0)),
    ("102", UtilityType.WATER, "23.7", "25.1", datetime(2023, 10, 2, 11, 30)),
    ("101", UtilityType.GAS, "4.25", "5.1", datetime(2023, 10, 3, 16, 20)),
    ("102", UtilityType.GAS, "20.1", "21.8", datetime(2023, 10, 3, 16, 45)),
    ("101", UtilityType.WATER, "14.2", "16.8", datetime(2026, 1, 18, 10, 0)),
]


def seed_database() -> None:
    """Seed the database with sample data."""
    Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        # Check if data already exists
        if db.query(Unit).first():
            print("Database already has data. Skipping seed.")
            return

        print("Seeding database...")

        units = {
            number: Unit(
                number=number,
                block=block,
                resident_name=resident,
                resident_role=role.value,
            )
            for number, block, resident, role in UNITS
        }
        db.add_all(units.values())
        db.flush()

        print(f"Created {len(units)} units: {', '.join(units)}")

        for number, utility_type, previous, current, date in READINGS:
            db.add(
                Reading(
                    unit_id=units[number].id,
                    type=utility_type.value,
                    previous_value=Decimal(previous),
                    current_value=Decimal(current),
                    date=date,
                    status=ReadingStatus.LIDO.value,
                )
            )

        print(f"Created {len(READINGS)} readings")

        if not db.query(User).filter(User.username == ADMIN_USERNAME).first():
            db.add(
                User(
                    username=ADMIN_USERNAME,
                    email="admin@condoflow.local",
                    hashed_password=get_password_hash(ADMIN_PASSWORD),
                )
            )
            print(f"Created admin user: {ADMIN_USERNAME} / {ADMIN_PASSWORD}")

        db.commit()

        print("\nSeed data created successfully!")


if __name__ == "__main__":
    seed_database()
