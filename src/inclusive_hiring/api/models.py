"""API models for request/response schemas."""

from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field
from datetime import datetime

from inclusive_hiring.core.models import ApplicationStatus, Job, Role


class ApplyRequest(BaseModel):
    """Candidate request to apply for a job."""
    job_id: str = Field(..., description="Job to apply for")
    idempotency_key: Optional[str] = Field(None, description="Client key that makes retries safe")


class TransitionRequest(BaseModel):
    """Employer review action moving an application forward."""
    status: ApplicationStatus = Field(..., description="Target status")
    expected_status: Optional[ApplicationStatus] = Field(
        None, description="Status the caller read before deciding; enables safe retries"
    )


class WithdrawRequest(BaseModel):
    """Candidate withdrawal of an application."""
    expected_status: Optional[ApplicationStatus] = Field(None, description="Status the caller last read")


class EmployerProfileUpdate(BaseModel):
    """Self-service employer profile edit; verification is not settable here."""
    display_name: Optional[str] = Field(None, description="Display name")
    company_name: Optional[str] = Field(None, description="Company name")
    contact_email: Optional[str] = Field(None, description="Contact email")


class IdentityEventRequest(BaseModel):
    """Sign-in / sign-up event forwarded by the authentication layer."""
    role: Role = Field(..., description="Account role")
    display_name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address")


class JobSearchResponse(BaseModel):
    """Response from job search."""
    success: bool = Field(..., description="Whether search was successful")
    jobs: List[Job] = Field(..., description="Matching jobs")
    total_count: int = Field(..., description="Total number of jobs found")
    search_metadata: Dict[str, Any] = Field(..., description="Search metadata")


class HealthCheck(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Check timestamp")
    version: str = Field(..., description="Service version")
    components: Dict[str, str] = Field(..., description="Component status")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(..., description="Error timestamp")
