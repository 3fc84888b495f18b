# backend/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from jose import JWTError
from sqlalchemy.orm import Session

from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import (
    REFRESH_TOKEN, create_access_token, create_refresh_token, decode_token, get_current_user,
)
from utils.audit import write_log, client_ip
from utils.helpers import new_object_id
from utils.responses import ok
from models.users import User, Role
from schemas import user as schemas
from schemas.common import ApiResponse
from database import get_db

router = APIRouter(prefix="/auth", tags=["Auth"])


def _issue_tokens(db: Session, user: User) -> dict:
    # Rotate the refresh token; only the latest one stays valid
    access_token = create_access_token(user)
    refresh_token = create_refresh_token(user)
    user.refresh_token = refresh_token
    db.commit()
    db.refresh(user)
    return {"access_token": access_token, "refresh_token": refresh_token, "token_type": "bearer"}


def _auth_payload(db: Session, user: User) -> schemas.AuthResponse:
    tokens = _issue_tokens(db, user)
    return schemas.AuthResponse(user=schemas.UserResponse.model_validate(user), **tokens)


# Register a new customer account
@router.post("/register", response_model=ApiResponse[schemas.AuthResponse], status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    # Normalize email input
    normalized_email = payload.email.strip().lower()

    # Check for existing user
    if db.query(User).filter(User.email == normalized_email).first():
        write_log(
            db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
            ip=client_ip(request), meta={"email": normalized_email, "reason": "Email exists"},
        )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User with this email already exists")

    # Create new user instance with hashed password
    new_user = User(
        email=normalized_email,
        password_hash=get_password_hash(payload.password),
        role=Role.CUSTOMER.value,
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone=payload.phone,
        addresses=[],
        is_active=True,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    data = _auth_payload(db, new_user)

    # Log successful registration event
    write_log(
        db, user_id=new_user.id, action="REGISTER", resource="auth", status="SUCCESS",
        ip=client_ip(request), meta={"email": new_user.email},
    )
    return ok(data, "User registered successfully")


# Authenticate user and issue a token pair
@router.post("/login", response_model=ApiResponse[schemas.AuthResponse])
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    db_user = db.query(User).filter(User.email == email).first()

    # Validate credentials and log failure on error
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    if not db_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    data = _auth_payload(db, db_user)

    # Log successful login event
    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": db_user.email})
    return ok(data, "Login successful")


# Exchange a valid refresh token for a new token pair
@router.post("/refresh", response_model=ApiResponse[schemas.TokenPair])
def refresh_token(payload: schemas.RefreshRequest, db: Session = Depends(get_db)):
    invalid = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    try:
        claims = decode_token(payload.refresh_token, REFRESH_TOKEN)
        user_id = int(claims["sub"])
    except (JWTError, ValueError):
        raise invalid

    user = db.query(User).filter(User.id == user_id, User.refresh_token == payload.refresh_token).first()
    if user is None:
        raise invalid

    return ok(_issue_tokens(db, user), "Token refreshed successfully")


@router.post("/logout", response_model=ApiResponse[None])
def logout(request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    current_user.refresh_token = None
    db.commit()
    write_log(db, user_id=current_user.id, action="LOGOUT", resource="auth", ip=client_ip(request))
    return ok(message="Logged out successfully")


# Retrieve current authenticated user details
@router.get("/profile", response_model=ApiResponse[schemas.UserResponse])
def get_profile(current_user: User = Depends(get_current_user)):
    return ok(schemas.UserResponse.model_validate(current_user))


@router.put("/profile", response_model=ApiResponse[schemas.UserResponse])
def update_profile(
    payload: schemas.UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    changes = payload.model_dump(exclude_unset=True, exclude={"addresses"})
    for key, value in changes.items():
        # Empty strings leave the stored value untouched
        if value:
            setattr(current_user, key, value)

    if payload.addresses is not None:
        addresses = []
        for address in payload.addresses:
            data = address.model_dump()
            if not data.get("id"):
                data["id"] = new_object_id()
            addresses.append(data)
        current_user.addresses = addresses

    db.commit()
    db.refresh(current_user)
    return ok(schemas.UserResponse.model_validate(current_user), "Profile updated successfully")


@router.put("/change-password", response_model=ApiResponse[None])
def change_password(
    payload: schemas.PasswordChange,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not verify_password(payload.current_password, current_user.password_hash):
        write_log(db, user_id=current_user.id, action="PASSWORD_CHANGE", resource="auth",
                  status="FAIL", ip=client_ip(request))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")

    current_user.password_hash = get_password_hash(payload.new_password)
    db.commit()
    write_log(db, user_id=current_user.id, action="PASSWORD_CHANGE", resource="auth", ip=client_ip(request))
    return ok(message="Password changed successfully")
