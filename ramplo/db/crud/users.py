from sqlalchemy.orm import Session
from ramplo.db.models.user import User
from ramplo.db.models.profile import UserProfile

def get_user(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()

def create_user(db: Session, email: str, comped_domains: list[str] = (), **kwargs) -> User:
    domain = email.rsplit("@", 1)[-1].lower()
    user = User(email=email, is_comped=domain in comped_domains, **kwargs)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def get_profile(db: Session, user_id: int) -> UserProfile | None:
    return db.query(UserProfile).filter(UserProfile.user_id == user_id).first()
