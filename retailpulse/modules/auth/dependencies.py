"""
Authentication dependencies for FastAPI.

Access tokens are issued by the dashboard's identity service; they carry
the caller's role and the business/store the session is bound to.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError
import jwt

from retailpulse.core.config import settings
from retailpulse.modules.auth.schemas import AuthContext, TokenClaims

# Security scheme
security = HTTPBearer()

REPORT_ROLES = ["superadmin", "business_admin", "store_admin", "cashier"]


class AuthDependencies:
    """Reusable authentication dependencies."""

    @staticmethod
    def get_auth_context(
        credentials: HTTPAuthorizationCredentials = Depends(security)
    ) -> AuthContext:
        """Decode the bearer token into an AuthContext."""
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

        try:
            payload = jwt.decode(
                credentials.credentials,
                settings.APP_SECRET_STRING,
                algorithms=[settings.ALGORITHM]
            )
            claims = TokenClaims(**payload)
        except (jwt.PyJWTError, ValidationError):
            raise credentials_exception

        if claims.type != "access":
            raise credentials_exception

        return AuthContext(
            user_id=claims.sub,
            role=claims.role,
            business_id=claims.business_id,
            store_id=claims.store_id,
            username=claims.username
        )

    @staticmethod
    def require_role(allowed_roles: list[str]):
        """Dependency requiring one of the given roles."""
        def role_checker(auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)):
            if auth_context.role not in allowed_roles:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"One of these roles is required: {', '.join(allowed_roles)}"
                )
            return auth_context
        return role_checker

    @staticmethod
    def require_report_access():
        """Dependency requiring any role allowed to view sales reports."""
        return AuthDependencies.require_role(REPORT_ROLES)


def create_access_token(claims: dict) -> str:
    """Sign a token with the service secret (used by tooling and tests)."""
    payload = {"type": "access", **claims}
    return jwt.encode(payload, settings.APP_SECRET_STRING, algorithm=settings.ALGORITHM)
