from pydantic import BaseModel
from typing import Optional

# ======================
# TOKEN SCHEMAS
# ======================

class TokenData(BaseModel):
    """Caller identity carried by a bearer token."""
    user_id: int
    # alumni | school_admin | super_admin
    role: Optional[str] = None
