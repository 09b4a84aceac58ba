from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from app.models.common import PrincipalID


class DispatchRequest(BaseModel):
    principal_id: PrincipalID
    action: str = Field(..., description="Name of the action to run")
    context_id: Optional[str] = Field(None, description="Context whose inherited data is passed to the action")
    params: Dict[str, Any] = Field(default_factory=dict, description="Action parameters")


class DispatchResult(BaseModel):
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, **data: Any) -> "DispatchResult":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str) -> "DispatchResult":
        return cls(success=False, error=error)


class PrincipalRegistration(BaseModel):
    principal_id: PrincipalID
