"""
Models Package - Business logic models
Centralized business logic separated from Flask routes
"""

from .enrollment_handler import EnrollmentHandler, EnrollmentConfirmation
from .attendance_matcher import AttendanceMatcher, MatchOutcome

__all__ = [
    'EnrollmentHandler',
    'EnrollmentConfirmation',
    'AttendanceMatcher',
    'MatchOutcome',
]
