"""
Review routes. Every review write refreshes the parent bootcamp's average rating.
"""

from fastapi import APIRouter, Depends, Request

from aggregates import recompute_average_rating
from database import Store, get_store
from errors import ValidationError
from guard import ensure_can_mutate
from logger import get_logger
from query import advanced_results
from schemas import Review as ReviewSchema, ReviewCreate, ReviewUpdate
from security import get_current_user, require_role

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["reviews"])


@router.get("/reviews")
def get_reviews(request: Request, store: Store = Depends(get_store)):
    return advanced_results(store.reviews, request.query_params.multi_items())


@router.get("/bootcamps/{bootcamp_id}/reviews")
def get_bootcamp_reviews(bootcamp_id: str, request: Request, store: Store = Depends(get_store)):
    return advanced_results(store.reviews, request.query_params.multi_items(), base={"bootcamp_id": bootcamp_id})


@router.get("/reviews/{review_id}")
def get_review(review_id: str, store: Store = Depends(get_store)):
    review = store.reviews.get_or_404(review_id, "Review")
    bootcamp = store.bootcamps.find_by_id(review["bootcamp_id"])
    if bootcamp:
        review["bootcamp"] = {"id": bootcamp["id"], "name": bootcamp.get("name"), "description": bootcamp.get("description")}
    return {"success": True, "data": review}


@router.post("/bootcamps/{bootcamp_id}/reviews", status_code=201)
def add_review(
    bootcamp_id: str,
    payload: ReviewCreate,
    current_user=Depends(require_role("user", "admin")),
    store: Store = Depends(get_store),
):
    bootcamp = store.bootcamps.get_or_404(bootcamp_id, "Bootcamp")
    if store.reviews.find_one({"bootcamp_id": bootcamp["id"], "user_id": current_user["id"]}):
        raise ValidationError("You have already reviewed this bootcamp")
    doc = ReviewSchema(bootcamp_id=bootcamp["id"], user_id=current_user["id"], **payload.model_dump()).model_dump()
    # The unique (bootcamp_id, user_id) index still rejects a concurrent duplicate.
    review = store.reviews.create(doc)
    recompute_average_rating(store, bootcamp["id"])
    logger.info("review created", review_id=review["id"], bootcamp_id=bootcamp["id"])
    return {"success": True, "data": review}


@router.put("/reviews/{review_id}")
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    current_user=Depends(get_current_user),
    store: Store = Depends(get_store),
):
    review = store.reviews.get_or_404(review_id, "Review")
    ensure_can_mutate(review, current_user, "update")
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return {"success": True, "data": review}
    updated = store.reviews.update_by_id(review_id, {"$set": changes})
    if "rating" in changes:
        recompute_average_rating(store, review["bootcamp_id"])
    return {"success": True, "data": updated}


@router.delete("/reviews/{review_id}")
def delete_review(
    review_id: str,
    current_user=Depends(get_current_user),
    store: Store = Depends(get_store),
):
    review = store.reviews.get_or_404(review_id, "Review")
    ensure_can_mutate(review, current_user, "delete")
    store.reviews.delete(review_id)
    recompute_average_rating(store, review["bootcamp_id"])
    logger.info("review deleted", review_id=review_id, bootcamp_id=review["bootcamp_id"])
    return {"success": True, "data": None}
