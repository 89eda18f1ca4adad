from .session_flow import SessionFlow
from .token_service import TokenClaims, TokenService

__all__ = ["SessionFlow", "TokenClaims", "TokenService"]
