"""Membership application intake and review."""

import logging

from library_api.core.logging_config import safe_log_identifier
from library_api.errors import not_found
from library_api.repositories.memory import InMemoryStore, MembershipApplicationRecord
from library_api.schemas.auth import AuthPrincipal
from library_api.schemas.membership import (
    ApplicationReviewed,
    ApplicationStatus,
    ApplicationSubmitted,
    ApplicationSummary,
    MembershipApplicationRequest,
    ReviewedApplication,
)

logger = logging.getLogger(__name__)


class MembershipService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def submit_application(self, payload: MembershipApplicationRequest) -> ApplicationSubmitted:
        record = self._store.create_application(**payload.model_dump())
        logger.info(
            "membership.application_submitted application_id=%s",
            safe_log_identifier(record.id, prefix="app"),
        )
        return ApplicationSubmitted(message="Application submitted successfully", application_id=record.id)

    def list_applications(self) -> list[ApplicationSummary]:
        return [self._to_summary(record) for record in self._store.list_applications()]

    def review_application(
        self,
        *,
        reviewer: AuthPrincipal,
        application_id: str,
        status: ApplicationStatus,
        review_notes: str | None,
    ) -> ApplicationReviewed:
        record = self._store.review_application(
            application_id,
            status=status,
            review_notes=review_notes,
            reviewed_by=reviewer.user_id,
        )
        if record is None:
            raise not_found("Application not found")

        logger.info(
            "membership.application_reviewed application_id=%s reviewer_id=%s status=%s",
            safe_log_identifier(record.id, prefix="app"),
            safe_log_identifier(reviewer.user_id, prefix="pid"),
            status.value,
        )
        return ApplicationReviewed(
            message="Application updated successfully",
            application=ReviewedApplication(
                id=record.id,
                first_name=record.first_name,
                last_name=record.last_name,
                email=record.email,
                status=record.status,
                review_notes=record.review_notes,
                reviewed_by=record.reviewed_by,
                reviewed_at=record.reviewed_at,
                updated_at=record.updated_at,
            ),
        )

    @staticmethod
    def _to_summary(record: MembershipApplicationRecord) -> ApplicationSummary:
        return ApplicationSummary(
            id=record.id,
            user_id=record.user_id,
            name=f"{record.first_name} {record.last_name}".strip(),
            email=record.email,
            phone=record.phone,
            address=f"{record.street}, {record.city}, {record.state} {record.zip_code}, {record.country}",
            applied_at=record.created_at,
            status=record.status,
            has_disability=record.has_disability,
            disability_details=record.disability_details,
            preferred_genres=list(record.preferred_genres),
            reading_frequency=record.reading_frequency,
            subscribe_newsletter=record.subscribe_newsletter,
            reviewed_by=record.reviewed_by,
            reviewed_at=record.reviewed_at,
            review_notes=record.review_notes,
        )
