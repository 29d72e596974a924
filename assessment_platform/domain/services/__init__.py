"""Domain services."""

from assessment_platform.domain.services.assessments import AssessmentService
from assessment_platform.domain.services.auth_service import AuthService

__all__ = [
    "AssessmentService",
    "AuthService",
]
