from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from marinecrm.database import get_db
from marinecrm.models.user import User
from marinecrm.schemas.auth import UserCreate, UserLogin, Token
from marinecrm.core.security import hash_password, verify_password, create_access_token

router = APIRouter(tags=["Authentication"])

@router.post("/signup", response_model=Token)
def signup(user: UserCreate, db: Session = Depends(get_db)):
    # Check if email already exists
    existing = db.query(User).filter(User.email == user.email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    # First account becomes the administrator
    role = "admin" if db.query(User).count() == 0 else "user"

    new_user = User(
        email=user.email,
        username=user.email.split("@")[0],
        hashed_password=hash_password(user.password),
        role=role
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    token = create_access_token({"sub": new_user.email, "role": new_user.role})
    return {"access_token": token, "token_type": "bearer", "role": new_user.role}


@router.post("/signin", response_model=Token)
def signin(data: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()

    if not user or not verify_password(data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.email, "role": user.role})
    return {"access_token": token, "token_type": "bearer", "role": user.role}
