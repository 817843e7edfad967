"""
Service layer for business logic
"""
from autoprofiler.services.profile_service import (
    ProfileService,
    ProfileState,
    create_profile_service,
)

__all__ = [
    "ProfileService",
    "ProfileState",
    "create_profile_service",
]
