"""
Course routes. Every course write refreshes the parent bootcamp's average cost.
"""

from fastapi import APIRouter, Depends, Request

from aggregates import recompute_average_cost
from database import Store, get_store
from guard import ensure_can_mutate
from logger import get_logger
from query import advanced_results
from schemas import Course as CourseSchema, CourseCreate, CourseUpdate
from security import require_role

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["courses"])


@router.get("/courses")
def get_courses(request: Request, store: Store = Depends(get_store)):
    return advanced_results(store.courses, request.query_params.multi_items())


@router.get("/bootcamps/{bootcamp_id}/courses")
def get_bootcamp_courses(bootcamp_id: str, request: Request, store: Store = Depends(get_store)):
    return advanced_results(store.courses, request.query_params.multi_items(), base={"bootcamp_id": bootcamp_id})


@router.get("/courses/{course_id}")
def get_course(course_id: str, store: Store = Depends(get_store)):
    course = store.courses.get_or_404(course_id, "Course")
    bootcamp = store.bootcamps.find_by_id(course["bootcamp_id"])
    if bootcamp:
        course["bootcamp"] = {"id": bootcamp["id"], "name": bootcamp.get("name"), "description": bootcamp.get("description")}
    return {"success": True, "data": course}


@router.post("/bootcamps/{bootcamp_id}/courses", status_code=201)
def add_course(
    bootcamp_id: str,
    payload: CourseCreate,
    current_user=Depends(require_role("publisher", "admin")),
    store: Store = Depends(get_store),
):
    bootcamp = store.bootcamps.get_or_404(bootcamp_id, "Bootcamp")
    ensure_can_mutate(bootcamp, current_user, "add a course to")
    doc = CourseSchema(bootcamp_id=bootcamp["id"], user_id=current_user["id"], **payload.model_dump()).model_dump()
    course = store.courses.create(doc)
    recompute_average_cost(store, bootcamp["id"])
    logger.info("course created", course_id=course["id"], bootcamp_id=bootcamp["id"])
    return {"success": True, "data": course}


@router.put("/courses/{course_id}")
def update_course(
    course_id: str,
    payload: CourseUpdate,
    current_user=Depends(require_role("publisher", "admin")),
    store: Store = Depends(get_store),
):
    course = store.courses.get_or_404(course_id, "Course")
    ensure_can_mutate(course, current_user, "update")
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return {"success": True, "data": course}
    updated = store.courses.update_by_id(course_id, {"$set": changes})
    if "tuition" in changes:
        recompute_average_cost(store, course["bootcamp_id"])
    return {"success": True, "data": updated}


@router.delete("/courses/{course_id}")
def delete_course(
    course_id: str,
    current_user=Depends(require_role("publisher", "admin")),
    store: Store = Depends(get_store),
):
    course = store.courses.get_or_404(course_id, "Course")
    ensure_can_mutate(course, current_user, "delete")
    store.courses.delete(course_id)
    # Recompute only once the delete has committed so the course is excluded.
    recompute_average_cost(store, course["bootcamp_id"])
    logger.info("course deleted", course_id=course_id, bootcamp_id=course["bootcamp_id"])
    return {"success": True, "data": None}
