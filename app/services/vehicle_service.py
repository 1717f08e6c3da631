"""Vehicle queries and mutations.

``build_vehicle_query`` is the listing pipeline: search, status filter, brand
filter, then sort. ``list_vehicles`` counts the filtered set before applying
the page window so the total is independent of paging.
"""
import logging

from fastapi import UploadFile
from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import utcnow
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreate, VehicleQuery, VehicleResponse, VehicleUpdate
from app.services.image_store import ImageStore
from app.utils.exceptions import ConflictError, NotFoundError
from app.utils.response import page_data

logger = logging.getLogger(__name__)

VEHICLE_NOT_FOUND = "Vehicle not found."

# Lookup keys are lowercased with underscores removed, so "licensePlate",
# "license_plate" and "LicensePlate" all resolve to the same column.
SORT_COLUMNS = {
    "licenseplate": Vehicle.license_plate,
    "brand": Vehicle.brand,
    "model": Vehicle.model,
    "year": Vehicle.year,
    "status": Vehicle.status,
    "createdat": Vehicle.created_at,
}


def _plate_conflict(plate: str) -> ConflictError:
    return ConflictError(f"License plate '{plate}' already exists.", status_code=400)


def resolve_sort_column(sort_by: str | None):
    key = (sort_by or "").replace("_", "").lower()
    return SORT_COLUMNS.get(key, Vehicle.id)


def build_vehicle_query(query: VehicleQuery) -> Select:
    stmt = select(Vehicle)

    # Case folding happens in the database on both sides of ILIKE. SQLite only
    # folds ASCII letters; PostgreSQL folds the full alphabet.
    search = (query.search or "").strip()
    if search:
        pattern = "%" + search.replace("/", "//").replace("%", "/%").replace("_", "/_") + "%"
        stmt = stmt.where(
            or_(
                Vehicle.license_plate.ilike(pattern, escape="/"),
                Vehicle.brand.ilike(pattern, escape="/"),
                Vehicle.model.ilike(pattern, escape="/"),
            )
        )

    if query.status is not None:
        stmt = stmt.where(Vehicle.status == query.status)

    brand = (query.brand or "").strip()
    if brand:
        stmt = stmt.where(Vehicle.brand == brand)

    column = resolve_sort_column(query.sort_by)
    descending = (query.sort_direction or "").lower() == "desc"
    stmt = stmt.order_by(column.desc() if descending else column.asc())
    if column is not Vehicle.id:
        stmt = stmt.order_by(Vehicle.id.asc())
    return stmt


async def list_vehicles(db: AsyncSession, query: VehicleQuery) -> dict:
    stmt = build_vehicle_query(query)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total_count = (await db.execute(count_stmt)).scalar_one()

    page_stmt = stmt.offset((query.page - 1) * query.page_size).limit(query.page_size)
    vehicles = (await db.execute(page_stmt)).scalars().all()

    items = [VehicleResponse.model_validate(v).model_dump(mode="json") for v in vehicles]
    return page_data(items, total_count, query.page, query.page_size)


async def get_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise NotFoundError(VEHICLE_NOT_FOUND)
    return vehicle


async def _plate_taken(db: AsyncSession, plate: str, exclude_id: int | None = None) -> bool:
    stmt = select(Vehicle.id).where(Vehicle.license_plate == plate)
    if exclude_id is not None:
        stmt = stmt.where(Vehicle.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    return result.first() is not None


async def _commit_or_conflict(db: AsyncSession, plate: str, images: ImageStore, new_image: str | None) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Unique constraint rejected license plate '%s'", plate)
        images.delete(new_image)
        raise _plate_conflict(plate)


async def create_vehicle(
    db: AsyncSession,
    payload: VehicleCreate,
    images: ImageStore,
    image: UploadFile | None = None,
) -> Vehicle:
    if await _plate_taken(db, payload.license_plate):
        raise _plate_conflict(payload.license_plate)

    vehicle = Vehicle(**payload.model_dump())
    if image is not None:
        vehicle.image_path = await images.save(image)

    db.add(vehicle)
    await _commit_or_conflict(db, payload.license_plate, images, vehicle.image_path)
    await db.refresh(vehicle)

    logger.info("Created vehicle %s (%s)", vehicle.id, vehicle.license_plate)
    return vehicle


async def update_vehicle(
    db: AsyncSession,
    vehicle_id: int,
    patch: VehicleUpdate,
    images: ImageStore,
    image: UploadFile | None = None,
) -> Vehicle:
    vehicle = await get_vehicle(db, vehicle_id)
    changes = patch.changes()

    new_plate = changes.pop("license_plate", None)
    if new_plate is not None and new_plate != vehicle.license_plate:
        if await _plate_taken(db, new_plate, exclude_id=vehicle.id):
            raise _plate_conflict(new_plate)
        vehicle.license_plate = new_plate

    for field, value in changes.items():
        setattr(vehicle, field, value)

    old_image = vehicle.image_path
    new_image = None
    if image is not None:
        new_image = await images.save(image)
        vehicle.image_path = new_image

    vehicle.updated_at = utcnow()
    await _commit_or_conflict(db, vehicle.license_plate, images, new_image)
    if new_image is not None:
        images.delete(old_image)
    await db.refresh(vehicle)

    logger.info("Updated vehicle %s", vehicle.id)
    return vehicle


async def delete_vehicle(db: AsyncSession, vehicle_id: int, images: ImageStore) -> None:
    vehicle = await get_vehicle(db, vehicle_id)
    image_path = vehicle.image_path

    await db.delete(vehicle)
    await db.commit()
    images.delete(image_path)

    logger.info("Deleted vehicle %s", vehicle_id)
