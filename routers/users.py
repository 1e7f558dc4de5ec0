import logging
from typing import List, Optional

import bcrypt
from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

import config
from crud import get_or_404
from database import get_db
from errors import ValidationError
from models import Admin, CampusUser, Faculty
from schemas.userSchema import AdminRead, CampusUserRead, CampusUserUpdate

logger = logging.getLogger(__name__)

user_router = APIRouter(prefix="/admin", tags=["Users"])


def hash_password(password: str) -> str:
    """Hashes a password using bcrypt."""
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed_password.decode('utf-8')

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_default_admin_if_not_exists(db: Session) -> Admin:
    admin = db.query(Admin).filter(Admin.username == config.DEFAULT_ADMIN_USERNAME).first()
    if admin:
        return admin
    admin = Admin(
        name="Parking Administrator",
        username=config.DEFAULT_ADMIN_USERNAME,
        password_hash=hash_password(config.DEFAULT_ADMIN_PASSWORD),
        email=config.DEFAULT_ADMIN_EMAIL,
        role="superadmin",
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Created default admin '%s'", admin.username)
    return admin


@user_router.get("/campus-users", response_model=List[CampusUserRead])
def list_campus_users(search: Optional[str] = Query(None), db: Session = Depends(get_db)):
    query = db.query(CampusUser)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            CampusUser.full_name.ilike(pattern),
            CampusUser.email.ilike(pattern),
            CampusUser.student_no.ilike(pattern),
            CampusUser.staff_no.ilike(pattern),
        ))
    return query.order_by(CampusUser.full_name).limit(100).all()

@user_router.put("/campus-users/{user_id}", response_model=CampusUserRead)
def update_campus_user(user_id: int, user_update: CampusUserUpdate, db: Session = Depends(get_db)):
    user = get_or_404(db, CampusUser, user_id, "Campus user")
    data = user_update.model_dump(exclude_unset=True)
    if data.get("faculty_id") is not None:
        get_or_404(db, Faculty, data["faculty_id"], "Faculty")
    if data.get("email") and db.query(CampusUser).filter(CampusUser.email == data["email"], CampusUser.id != user_id).first():
        raise ValidationError("Email already registered")
    for key, value in data.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user

@user_router.get("/admins", response_model=List[AdminRead])
def list_admins(db: Session = Depends(get_db)):
    return db.query(Admin).order_by(Admin.id).all()
