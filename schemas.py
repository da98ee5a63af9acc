"""
Database Schemas for the Bootcamp Directory

MongoDB collections are defined below using Pydantic models. Each class name is
converted to lowercase for the collection name (Bootcamp -> "bootcamp").

We will use these collections:
- user: system users (user, publisher, admin)
- bootcamp: bootcamps published by a user
- course: courses offered by a bootcamp
- review: user reviews of a bootcamp, at most one per user and bootcamp

Derived fields (bootcamp average_cost / average_rating) appear on the stored
Bootcamp model only; no request model accepts them.
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

Role = Literal["user", "publisher", "admin"]
SkillLevel = Literal["beginner", "intermediate", "advanced"]
Career = Literal["Web Development", "Mobile Development", "UI/UX", "Data Science", "Business", "Other"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    name: str = Field(..., min_length=1, max_length=60)
    email: EmailStr
    password_hash: str = Field(..., description="BCrypt hash of password")
    role: Role = Field("user")
    created_at: datetime = Field(default_factory=_now)


class Location(BaseModel):
    """GeoJSON point plus the address parts returned by the geocoder."""

    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(..., min_length=2, max_length=2, description="[longitude, latitude]")
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None


class Bootcamp(BaseModel):
    user_id: str = Field(..., description="Reference to user _id (owner)")
    name: str = Field(..., min_length=1, max_length=50)
    slug: str
    description: str = Field(..., min_length=1, max_length=500)
    website: Optional[str] = Field(None, pattern=r"^https?://\S+$")
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    address: str = Field(..., min_length=1)
    location: Optional[Location] = None
    careers: List[Career] = Field(..., min_length=1)
    average_rating: Optional[float] = Field(None, ge=1, le=10)
    average_cost: Optional[float] = None
    photo: str = "no-photo.jpg"
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False
    created_at: datetime = Field(default_factory=_now)


class Course(BaseModel):
    bootcamp_id: str = Field(..., description="Reference to bootcamp _id")
    user_id: str = Field(..., description="Reference to user _id (creator)")
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    weeks: int = Field(..., ge=1)
    tuition: float = Field(..., ge=0)
    minimum_skill: SkillLevel
    scholarship_available: bool = False
    created_at: datetime = Field(default_factory=_now)


class Review(BaseModel):
    bootcamp_id: str = Field(..., description="Reference to bootcamp _id")
    user_id: str = Field(..., description="Reference to user _id (author)")
    title: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=10)
    created_at: datetime = Field(default_factory=_now)


# Request models

class BootcampCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    website: Optional[str] = Field(None, pattern=r"^https?://\S+$")
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    address: str = Field(..., min_length=1)
    careers: List[Career] = Field(..., min_length=1)
    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False


class BootcampUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    website: Optional[str] = Field(None, pattern=r"^https?://\S+$")
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, min_length=1)
    careers: Optional[List[Career]] = Field(None, min_length=1)
    housing: Optional[bool] = None
    job_assistance: Optional[bool] = None
    job_guarantee: Optional[bool] = None
    accept_gi: Optional[bool] = None


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    weeks: int = Field(..., ge=1)
    tuition: float = Field(..., ge=0)
    minimum_skill: SkillLevel
    scholarship_available: bool = False


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    weeks: Optional[int] = Field(None, ge=1)
    tuition: Optional[float] = Field(None, ge=0)
    minimum_skill: Optional[SkillLevel] = None
    scholarship_available: Optional[bool] = None


class ReviewCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=10)


class ReviewUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    text: Optional[str] = Field(None, min_length=1)
    rating: Optional[int] = Field(None, ge=1, le=10)


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=60)
    email: EmailStr
    password: str
    role: Literal["user", "publisher"] = "user"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UpdateDetailsRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=60)
    email: Optional[EmailStr] = None


class UpdatePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=60)
    email: EmailStr
    password: str
    role: Role = "user"


class UpdateUserRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=60)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None


class TokenResponse(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
