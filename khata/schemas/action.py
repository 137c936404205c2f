"""Action result returned by every mutating route"""
from typing import Optional
from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """{success: true} or {success: false, error: <code or message>}

    The codes "duplicate" and "not_enough" are matched by the front end.
    """
    success: bool = Field(..., description="Whether the action was applied")
    error: Optional[str] = Field(None, description="Sentinel code or store error message")
    id: Optional[int] = Field(None, description="Id of the created / affected row")

    @classmethod
    def ok(cls, row_id: Optional[int] = None) -> "ActionResult":
        return cls(success=True, id=row_id)

    @classmethod
    def failed(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)
