from .profile_schema import ProfileRequest

__all__ = [
    "ProfileRequest",
]
