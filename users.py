"""
Admin-only user management.
"""

from fastapi import APIRouter, Depends, Request

from database import Store, get_store
from logger import get_logger
from query import advanced_results
from schemas import CreateUserRequest, UpdateUserRequest, User as UserSchema
from security import hash_password, public_user, require_role

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])

admin_only = require_role("admin")


@router.get("")
def get_users(request: Request, admin=Depends(admin_only), store: Store = Depends(get_store)):
    results = advanced_results(store.users, request.query_params.multi_items())
    results["data"] = [public_user(u) for u in results["data"]]
    return results


@router.get("/{user_id}")
def get_user(user_id: str, admin=Depends(admin_only), store: Store = Depends(get_store)):
    return {"success": True, "data": public_user(store.users.get_or_404(user_id, "User"))}


@router.post("", status_code=201)
def create_user(payload: CreateUserRequest, admin=Depends(admin_only), store: Store = Depends(get_store)):
    user_doc = UserSchema(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=payload.role,
    ).model_dump()
    user = store.users.create(user_doc)
    logger.info("user created by admin", user_id=user["id"], admin_id=admin["id"])
    return {"success": True, "data": public_user(user)}


@router.put("/{user_id}")
def update_user(user_id: str, payload: UpdateUserRequest, admin=Depends(admin_only), store: Store = Depends(get_store)):
    user = store.users.get_or_404(user_id, "User")
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if changes:
        user = store.users.update_by_id(user_id, {"$set": changes})
    return {"success": True, "data": public_user(user)}


@router.delete("/{user_id}")
def delete_user(user_id: str, admin=Depends(admin_only), store: Store = Depends(get_store)):
    store.users.get_or_404(user_id, "User")
    store.users.delete(user_id)
    logger.info("user deleted by admin", user_id=user_id, admin_id=admin["id"])
    return {"success": True, "data": None}
