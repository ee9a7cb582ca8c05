from typing import Optional

from sqlmodel import Session, select

from pitchthesis.core.security import hash_password
from pitchthesis.db.models import User


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.exec(select(User).where(User.username == username)).first()


def create_user(db: Session, username: str, password: str) -> User:
    """Raises sqlalchemy IntegrityError when the username is taken."""
    u = User(username=username, hashed_password=hash_password(password))
    db.add(u)
    db.commit()
    db.refresh(u)
    return u
