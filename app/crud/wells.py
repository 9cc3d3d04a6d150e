from app.models.survey import Well
from sqlmodel import Session, select


def create_well(well: Well, session: Session) -> Well:
    session.add(well)
    session.commit()
    session.refresh(well)
    return well


def get_well(well_id: str, session: Session) -> Well | None:
    return session.get(Well, well_id)


def get_all_wells(session: Session) -> list[Well]:
    return session.exec(select(Well).order_by(Well.well_name)).all()
