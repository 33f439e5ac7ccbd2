# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from repositories.user import UserRepository
from schemas import user as schemas
from schemas.common import Message
from utils.audit import write_log, client_ip
from utils.hashing import verify_password
from utils.rate_limit import auth_rate_limit
from utils.tokenJWT import get_current_user, issue_token, revoke_tokens
from utils.validation import FieldErrors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

# Register a new user with the default customer role
@router.post(
    "/register",
    response_model=schemas.AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth_rate_limit)],
)
def register(payload: schemas.RegisterRequest, request: Request, db: Session = Depends(get_db)):
    errors = FieldErrors(db)
    errors.unique("email", User.email, payload.email.strip().lower(), case_insensitive=True)
    if payload.password != payload.password_confirmation:
        errors.add("password", "The password field confirmation does not match.")
    if errors.errors:
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": payload.email, "reason": "validation"})
    errors.check()

    # User row and customer role link are committed together
    data = payload.model_dump(exclude={"password_confirmation"})
    user = UserRepository(db).create(data, role_names=("customer",))
    token = issue_token(db, user)

    write_log(db, user_id=user.id, action="REGISTER", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": user.email})
    logger.info("Registered user %s", user.id)

    return {"user": user, "token": token}


# Authenticate user and issue a bearer token
@router.post("/login", response_model=schemas.AuthResponse, dependencies=[Depends(auth_rate_limit)])
def login(payload: schemas.LoginRequest, request: Request, db: Session = Depends(get_db)):
    user = UserRepository(db).find_by_email(payload.email)

    # Validate credentials and log failure on error
    if not user or not verify_password(payload.password, user.password_hash):
        write_log(db, user_id=(user.id if user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": payload.email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="The provided credentials are incorrect.")

    token = issue_token(db, user)

    write_log(db, user_id=user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": user.email})

    return {"user": user, "token": token}


# Revoke every token of the current user
@router.post("/logout", response_model=Message)
def logout(request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    revoked = revoke_tokens(db, current_user)
    write_log(db, user_id=current_user.id, action="LOGOUT", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"revoked": revoked})
    return {"message": "Logged out successfully"}


# Revoke every token and mint a single new one
@router.post("/refresh")
def refresh(request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    revoke_tokens(db, current_user)
    token = issue_token(db, current_user)
    write_log(db, user_id=current_user.id, action="TOKEN_REFRESH", resource="auth",
              status="SUCCESS", ip=client_ip(request))
    return {"token": token, "user": schemas.UserOut.model_validate(current_user)}


# Retrieve current authenticated user details
@router.get("/user", response_model=schemas.UserEnvelope)
def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}


@router.get("/check", response_model=schemas.TokenCheck)
def check(current_user: User = Depends(get_current_user)):
    return {"valid": True, "user": current_user}


@router.get("/roles", response_model=schemas.RolesEnvelope)
def roles(current_user: User = Depends(get_current_user)):
    return {"roles": current_user.roles}
