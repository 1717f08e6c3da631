from datetime import datetime

from pydantic import BaseModel, Field

from app.models.enums import VehicleStatus


class VehicleCreate(BaseModel):
    license_plate: str = Field(min_length=1, max_length=50)
    brand: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int = Field(ge=1900, le=2100)
    color: str | None = Field(default=None, max_length=30)
    vin_number: str | None = Field(default=None, max_length=50)
    engine_type: str | None = Field(default=None, max_length=30)
    fuel_type: str | None = Field(default=None, max_length=30)
    mileage: float | None = Field(default=None, ge=0)
    status: VehicleStatus = VehicleStatus.AVAILABLE
    notes: str | None = Field(default=None, max_length=500)


class VehicleUpdate(BaseModel):
    """Patch payload: only fields that were explicitly set are applied."""

    license_plate: str | None = Field(default=None, min_length=1, max_length=50)
    brand: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=100)
    year: int | None = Field(default=None, ge=1900, le=2100)
    color: str | None = Field(default=None, max_length=30)
    vin_number: str | None = Field(default=None, max_length=50)
    engine_type: str | None = Field(default=None, max_length=30)
    fuel_type: str | None = Field(default=None, max_length=30)
    mileage: float | None = Field(default=None, ge=0)
    status: VehicleStatus | None = None
    notes: str | None = Field(default=None, max_length=500)

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class VehicleQuery(BaseModel):
    search: str | None = None
    status: VehicleStatus | None = None
    brand: str | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)
    sort_by: str = "id"
    sort_direction: str = "asc"


class VehicleResponse(BaseModel):
    id: int
    license_plate: str
    brand: str
    model: str
    year: int
    color: str | None = None
    vin_number: str | None = None
    engine_type: str | None = None
    fuel_type: str | None = None
    mileage: float | None = None
    status: VehicleStatus
    image_url: str | None = Field(default=None, validation_alias="image_path")
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
