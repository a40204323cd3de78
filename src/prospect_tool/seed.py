"""Seed users so imports have an owner"""
from sqlalchemy.orm import Session
from sqlalchemy import select

from src.prospect_tool.database import SessionLocal, engine
from src.prospect_tool.models import Base
from src.prospect_tool.models.user import User, UserRole

SEED_USERS = [
    ("admin@example.com", "System Admin", UserRole.ADMIN),
    ("agent@example.com", "Recruiting Agent", UserRole.AGENT),
    ("viewer@example.com", "Read-only Viewer", UserRole.VIEWER),
]


def ensure_user(db: Session, email: str, name: str, role: UserRole) -> User:
    existing = db.execute(
        select(User).where(User.email == email)
    ).scalar_one_or_none()
    
    if existing:
        print(f"{role.value} user already exists: {email}")
        return existing
    
    user = User(email=email, name=name, role=role, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    print(f"Created {role.value} user: {email} (ID: {user.id})")
    return user


def run_seed(create_tables: bool = False) -> list[User]:
    if create_tables:
        Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        users = [ensure_user(db, email, name, role) for email, name, role in SEED_USERS]
    print("Seed completed successfully")
    return users


if __name__ == "__main__":
    run_seed()
