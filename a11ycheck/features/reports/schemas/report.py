from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EmailReportRequest(BaseModel):
    scan_id: Optional[str] = Field(None, alias="scanId")
    url: str = Field(..., min_length=1)
    score: int = Field(..., ge=0, le=100)
    total_issues: int = Field(..., alias="totalIssues", ge=0)

    model_config = ConfigDict(populate_by_name=True)


class EmailReportResponse(BaseModel):
    email_sent: bool
    sent_to: str
