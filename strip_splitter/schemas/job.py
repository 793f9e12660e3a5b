from datetime import datetime
from enum import Enum

from pydantic import Field

from strip_splitter.schemas.split import CamelModel, ProcessResult, ProgressUpdate


class JobStatus(str, Enum):
    """Status of a split job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class SplitRequest(CamelModel):
    """Request to split every image of a folder."""

    input_folder: str = Field(description="Folder holding the source images")
    output_folder: str = Field(description="Folder receiving the segments (created if missing)")
    split_height: int | None = Field(default=None, gt=0)
    sensitivity: int | None = Field(default=None, ge=0, le=100)
    scan_line_step: int | None = Field(default=None, ge=0)
    ignorable_border: int | None = Field(default=None, ge=0)
    webhook_url: str | None = Field(
        default=None,
        description="Optional URL to call when processing completes",
    )


class Job(CamelModel):
    """Split job with progress and result."""

    id: str
    status: JobStatus
    created_at: datetime
    updated_at: datetime
    input_folder: str
    output_folder: str
    webhook_url: str | None = None
    progress: ProgressUpdate | None = None
    result: ProcessResult | None = None
    error: str | None = None


class JobStatusResponse(CamelModel):
    """Response for job status endpoint."""

    id: str
    status: JobStatus
    created_at: datetime
    updated_at: datetime
    progress: ProgressUpdate | None = None
    result: ProcessResult | None = None
    error: str | None = None


class SplitSubmitResponse(CamelModel):
    """Response after submitting a folder for splitting."""

    job_id: str = Field(description="Unique identifier for the job")
    message: str = Field(default="Folder submitted for processing")
