# backend/routes/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.stock import DashboardStats
from storage import DatabaseStorage
from utils.session import get_current_user

router = APIRouter(
    prefix="/api/dashboard",
    tags=["Dashboard"]
)


# Stock counts, products per category and the five latest entries/exits
@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return DatabaseStorage(db).get_dashboard_stats()
