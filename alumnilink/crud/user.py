from sqlalchemy.orm import Session
from typing import Optional
from alumnilink import models


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_active_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(
        models.User.id == user_id,
        models.User.is_active.is_(True),
    ).first()
