from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.enums import VehicleStatus
from app.schemas.vehicle import VehicleCreate, VehicleQuery, VehicleResponse, VehicleUpdate
from app.services import vehicle_service
from app.services.image_store import ImageStore, get_image_store
from app.utils.response import success_response

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def _vehicle_data(vehicle) -> dict:
    return VehicleResponse.model_validate(vehicle).model_dump(mode="json")


def _upload_or_none(image: UploadFile | None) -> UploadFile | None:
    # Browsers send an empty part when the file input is left blank
    if image is None or not image.filename:
        return None
    return image


@router.get("")
async def list_vehicles(
    search: str | None = Query(None),
    status: VehicleStatus | None = Query(None),
    brand: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
    sort_by: str = Query("id", alias="sortBy"),
    sort_direction: str = Query("asc", alias="sortDirection"),
    db: AsyncSession = Depends(get_db),
):
    query = VehicleQuery(
        search=search,
        status=status,
        brand=brand,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    return success_response(data=await vehicle_service.list_vehicles(db, query))


@router.get("/{vehicle_id}")
async def get_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    vehicle = await vehicle_service.get_vehicle(db, vehicle_id)
    return success_response(data=_vehicle_data(vehicle))


@router.post("", status_code=201, dependencies=[Depends(get_current_user)])
async def create_vehicle(
    license_plate: str = Form(..., min_length=1, max_length=50),
    brand: str = Form(..., min_length=1, max_length=100),
    model: str = Form(..., min_length=1, max_length=100),
    year: int = Form(..., ge=1900, le=2100),
    color: str | None = Form(None, max_length=30),
    vin_number: str | None = Form(None, max_length=50),
    engine_type: str | None = Form(None, max_length=30),
    fuel_type: str | None = Form(None, max_length=30),
    mileage: float | None = Form(None, ge=0),
    status: VehicleStatus | None = Form(None),
    notes: str | None = Form(None, max_length=500),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
):
    payload = VehicleCreate(
        license_plate=license_plate,
        brand=brand,
        model=model,
        year=year,
        color=color,
        vin_number=vin_number,
        engine_type=engine_type,
        fuel_type=fuel_type,
        mileage=mileage,
        status=status or VehicleStatus.AVAILABLE,
        notes=notes,
    )
    vehicle = await vehicle_service.create_vehicle(db, payload, images, _upload_or_none(image))
    return success_response(data=_vehicle_data(vehicle))


@router.put("/{vehicle_id}", dependencies=[Depends(get_current_user)])
async def update_vehicle(
    vehicle_id: int,
    license_plate: str | None = Form(None, min_length=1, max_length=50),
    brand: str | None = Form(None, min_length=1, max_length=100),
    model: str | None = Form(None, min_length=1, max_length=100),
    year: int | None = Form(None, ge=1900, le=2100),
    color: str | None = Form(None, max_length=30),
    vin_number: str | None = Form(None, max_length=50),
    engine_type: str | None = Form(None, max_length=30),
    fuel_type: str | None = Form(None, max_length=30),
    mileage: float | None = Form(None, ge=0),
    status: VehicleStatus | None = Form(None),
    notes: str | None = Form(None, max_length=500),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
):
    submitted = {
        "license_plate": license_plate,
        "brand": brand,
        "model": model,
        "year": year,
        "color": color,
        "vin_number": vin_number,
        "engine_type": engine_type,
        "fuel_type": fuel_type,
        "mileage": mileage,
        "status": status,
        "notes": notes,
    }
    patch = VehicleUpdate(**{k: v for k, v in submitted.items() if v is not None})
    vehicle = await vehicle_service.update_vehicle(db, vehicle_id, patch, images, _upload_or_none(image))
    return success_response(data=_vehicle_data(vehicle))


@router.delete("/{vehicle_id}", status_code=204, dependencies=[Depends(get_current_user)])
async def delete_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
):
    await vehicle_service.delete_vehicle(db, vehicle_id, images)
    return Response(status_code=204)
