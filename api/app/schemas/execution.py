"""
Code execution schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ExecuteCodeRequest(BaseModel):
    """Request to run code for a lesson."""
    code: str = Field(..., description="Python source to execute")
    lesson_id: int = Field(..., description="Lesson the attempt belongs to")

    class Config:
        json_schema_extra = {
            "example": {
                "code": "print(2 + 2)",
                "lesson_id": 1
            }
        }


class ExecutionResult(BaseModel):
    """Normalized sandbox result. `error` carries stderr or the failure message."""
    output: str = Field("", description="Captured stdout")
    error: Optional[str] = Field(None, description="Captured stderr or failure message")
    execution_time: int = Field(..., description="Wall-clock milliseconds measured by this service")
    passed: bool = Field(False, exclude=True)

    @classmethod
    def failure(cls, message: str, execution_time: int) -> "ExecutionResult":
        """Build the result for a sandbox that could not be reached or answered badly."""
        return cls(
            output="",
            error=f"Execution failed: {message}",
            execution_time=execution_time,
            passed=False,
        )


class SubmissionResponse(BaseModel):
    """A recorded execution attempt."""
    id: int
    lesson_id: int
    code: str
    output: Optional[str] = None
    error: Optional[str] = None
    passed: bool
    created_at: datetime

    class Config:
        from_attributes = True
