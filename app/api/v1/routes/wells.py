from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlmodel import Session

from app.crud.wells import create_well, get_all_wells, get_well as get_well_crud
from app.db.session import session
from app.models.survey import Well
from app.utils.error_handling import NotFoundError

router = APIRouter(tags=["wells"])


class WellCreate(BaseModel):
    well_name: str
    rig_name: Optional[str] = None
    sensor_offset: Optional[float] = None


@router.get("/")
async def get_wells(db: Session = Depends(session)):
    return get_all_wells(db)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def add_well(data: WellCreate, db: Session = Depends(session)):
    return create_well(Well(**data.model_dump()), db)


@router.get("/{well_id}")
async def get_well(well_id: str, db: Session = Depends(session)):
    well = get_well_crud(well_id, db)
    if well is None:
        raise NotFoundError(f"Well {well_id} not found", details={"well_id": well_id})
    return well
