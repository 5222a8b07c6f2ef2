from pydantic import BaseModel
from typing import Optional


class AuthContext(BaseModel):
    """Identity and scope of the caller, decoded from the access token"""
    user_id: str
    role: Optional[str] = None
    business_id: Optional[str] = None
    store_id: Optional[str] = None
    username: Optional[str] = None


class TokenClaims(BaseModel):
    sub: str
    role: Optional[str] = None
    business_id: Optional[str] = None
    store_id: Optional[str] = None
    username: Optional[str] = None
    type: str = "access"
