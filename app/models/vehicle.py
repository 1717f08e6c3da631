from sqlalchemy import CheckConstraint, Column, DateTime, Enum, Float, Integer, String

from app.database import Base, utcnow
from app.models.enums import VehicleStatus


class Vehicle(Base):
    __tablename__ = "vehicles"
    __table_args__ = (
        CheckConstraint("year BETWEEN 1900 AND 2100", name="ck_vehicles_year"),
        CheckConstraint("mileage IS NULL OR mileage >= 0", name="ck_vehicles_mileage"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_plate = Column(String(50), nullable=False, unique=True)
    brand = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String(30), nullable=True)
    vin_number = Column(String(50), nullable=True)
    engine_type = Column(String(30), nullable=True)
    fuel_type = Column(String(30), nullable=True)
    mileage = Column(Float, nullable=True)
    status = Column(
        Enum(VehicleStatus, native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=VehicleStatus.AVAILABLE,
    )
    image_path = Column(String(500), nullable=True)
    notes = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
