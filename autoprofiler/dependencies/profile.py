from autoprofiler.services import ProfileService, create_profile_service


def get_profile_service() -> ProfileService:
    """
    Dependency building a fresh ProfileService from settings.

    Usage:
        @router.post("/profile")
        async def profile(service: ProfileService = Depends(get_profile_service)):
            ...
    """
    return create_profile_service()
