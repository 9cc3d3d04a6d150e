from fastapi import APIRouter, status

from app.db.session import create_db_and_tables

router = APIRouter(tags=["core"])


@router.get("/health")
def health_check():
    return {"status": "ok"}


@router.post("/create-tables", status_code=status.HTTP_200_OK)
def create_tables():
    """
    Create any missing database tables.

    Safe to call repeatedly; existing tables and stored surveys are left as they are.
    """
    create_db_and_tables()
    return {"message": "Database tables are up to date"}
