from authentication.domain.models.user import DEFAULT_PROFILE_PIC, CustomUser

__all__ = ["CustomUser", "DEFAULT_PROFILE_PIC"]
