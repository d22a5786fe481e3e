from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from pydantic import BaseModel, EmailStr

from marinecrm.database import get_db
from marinecrm.models.user import User
from marinecrm.core.security import hash_password, get_current_user

router = APIRouter(
    prefix="/users",
    tags=["User Management"]
)

ROLES = ["admin", "manager", "user"]


def check_role(role: str) -> None:
    if role not in ROLES:
        raise HTTPException(status_code=400, detail="Invalid role. Must be 'admin', 'manager', or 'user'")


# Pydantic Schemas
class UserCreate(BaseModel):
    email: EmailStr
    password: str
    role: str # 'admin', 'manager', 'user'

class RoleUpdate(BaseModel):
    role: str

class UserOut(BaseModel):
    id: int
    email: str
    username: str
    role: str

    class Config:
        from_attributes = True

# Dependency to check if current user is admin
def get_current_admin(current_user: dict = Depends(get_current_user)):
    if current_user["role"] != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access user management"
        )
    return current_user

@router.get("/", response_model=List[UserOut])
def list_users(
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_admin)
):
    """List all users. Only for Admins."""
    return db.query(User).all()

@router.post("/", response_model=UserOut)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_admin)
):
    """Create a new user. Only for Admins."""
    if db.query(User).filter(User.email == user_in.email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    check_role(user_in.role)

    new_user = User(
        email=user_in.email,
        username=user_in.email.split("@")[0],
        hashed_password=hash_password(user_in.password),
        role=user_in.role
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user

@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_admin)
):
    """Delete a user. Only for Admins."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    # Prevent deleting yourself (compare email since current_user is a dict)
    if user.email == current_user["email"]:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")

    db.delete(user)
    db.commit()
    return {"message": "User deleted successfully"}

@router.put("/{user_id}/role", response_model=UserOut)
def change_role(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_admin)
):
    """Promote or demote a team member. Only for Admins.

    The new role applies to tokens issued at the member's next sign-in.
    """
    check_role(payload.role)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    # the acting admin keeps their own role
    if user.email == current_user["email"]:
        raise HTTPException(status_code=400, detail="Cannot change your own role")

    user.role = payload.role
    db.commit()
    db.refresh(user)
    return user
