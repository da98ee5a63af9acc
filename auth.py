from fastapi import APIRouter, Depends

from database import Store, get_store
from errors import AuthenticationError
from logger import get_logger
from schemas import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
    User as UserSchema,
)
from security import create_access_token, get_current_user, hash_password, public_user, verify_password

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(payload: RegisterRequest, store: Store = Depends(get_store)):
    user_doc = UserSchema(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=payload.role,
    ).model_dump()
    # Duplicate emails are rejected by the unique index on user.email
    user = store.users.create(user_doc)
    logger.info("user registered", user_id=user["id"], role=user["role"])
    return TokenResponse(access_token=create_access_token({"sub": user["id"]}))


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, store: Store = Depends(get_store)):
    user = store.users.find_one({"email": payload.email})
    if not user or not verify_password(payload.password, user.get("password_hash", "")):
        raise AuthenticationError("Invalid credentials")
    return TokenResponse(access_token=create_access_token({"sub": user["id"]}))


@router.get("/me")
def me(current_user=Depends(get_current_user)):
    return {"success": True, "data": public_user(current_user)}


@router.put("/updatedetails")
def update_details(payload: UpdateDetailsRequest, current_user=Depends(get_current_user), store: Store = Depends(get_store)):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return {"success": True, "data": public_user(current_user)}
    user = store.users.update_by_id(current_user["id"], {"$set": changes})
    return {"success": True, "data": public_user(user)}


@router.put("/updatepassword", response_model=TokenResponse)
def update_password(payload: UpdatePasswordRequest, current_user=Depends(get_current_user), store: Store = Depends(get_store)):
    if not verify_password(payload.current_password, current_user.get("password_hash", "")):
        raise AuthenticationError("Password is incorrect")
    store.users.update_by_id(current_user["id"], {"$set": {"password_hash": hash_password(payload.new_password)}})
    return TokenResponse(access_token=create_access_token({"sub": current_user["id"]}))
