"""Membership application schemas."""

from datetime import date, datetime
from enum import Enum

from pydantic import Field

from library_api.schemas.base import ApiModel


class ApplicationStatus(str, Enum):
    PENDING = "PENDING"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class MembershipApplicationRequest(ApiModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str = Field(min_length=1)
    alternate_phone: str | None = None
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    country: str = Field(min_length=1)
    date_of_birth: date
    gender: str = Field(min_length=1)
    preferred_genres: list[str] = Field(min_length=1)
    reading_frequency: str = Field(min_length=1)
    has_disability: bool = False
    disability_details: str | None = None
    subscribe_newsletter: bool = False


class ApplicationSubmitted(ApiModel):
    success: bool = True
    message: str
    application_id: str


class ApplicationSummary(ApiModel):
    id: str
    user_id: str | None = None
    name: str
    email: str
    phone: str
    address: str
    applied_at: datetime
    status: ApplicationStatus
    has_disability: bool
    disability_details: str | None = None
    preferred_genres: list[str]
    reading_frequency: str
    subscribe_newsletter: bool
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    review_notes: str | None = None


class ReviewApplicationRequest(ApiModel):
    status: ApplicationStatus
    review_notes: str | None = None


class ReviewedApplication(ApiModel):
    id: str
    first_name: str
    last_name: str
    email: str
    status: ApplicationStatus
    review_notes: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    updated_at: datetime | None = None


class ApplicationReviewed(ApiModel):
    message: str
    application: ReviewedApplication
