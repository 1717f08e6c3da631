import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.enums import UserRole, VehicleStatus
from app.models.user import User
from app.models.vehicle import Vehicle
from app.services.auth_service import hash_password

logger = logging.getLogger(__name__)

SEED_VEHICLES = [
    {"license_plate": "1AB-1234", "brand": "Toyota", "model": "Hilux Revo", "year": 2021,
     "color": "White", "engine_type": "Diesel", "fuel_type": "Diesel B7", "mileage": 48200,
     "status": VehicleStatus.AVAILABLE},
    {"license_plate": "2CD-5678", "brand": "Honda", "model": "City", "year": 2019,
     "color": "Silver", "engine_type": "Petrol", "fuel_type": "Gasohol E20", "mileage": 91350,
     "status": VehicleStatus.IN_USE},
    {"license_plate": "3EF-9012", "brand": "Isuzu", "model": "D-Max", "year": 2020,
     "color": "Gray", "engine_type": "Diesel", "fuel_type": "Diesel B7", "mileage": 120400,
     "status": VehicleStatus.MAINTENANCE},
    {"license_plate": "4GH-3456", "brand": "BYD", "model": "Atto 3", "year": 2023,
     "color": "Blue", "engine_type": "Electric", "fuel_type": "Electric", "mileage": 15800,
     "status": VehicleStatus.AVAILABLE},
    {"license_plate": "5JK-7890", "brand": "Toyota", "model": "Corolla Altis", "year": 2012,
     "color": "Black", "engine_type": "Petrol", "fuel_type": "Gasoline 95", "mileage": 260000,
     "status": VehicleStatus.RETIRED},
]


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(Vehicle).limit(1))
    if result.scalars().first() is not None:
        return

    for v in SEED_VEHICLES:
        session.add(Vehicle(**v))

    result = await session.execute(select(User).where(User.username == settings.admin_username))
    if result.scalars().first() is None:
        session.add(User(
            username=settings.admin_username,
            password_hash=hash_password(settings.admin_password),
            full_name="Fleet Administrator",
            role=UserRole.ADMIN,
        ))

    await session.commit()
    logger.info("Seeded %d demo vehicles", len(SEED_VEHICLES))
