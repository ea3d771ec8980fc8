from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SummarizeRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: Optional[str] = None
    mode: Optional[str] = "normal"
    stream: Optional[bool] = False  # plain-text chunked body when set
    brochure: Optional[bool] = False
    existing_content: Optional[str] = Field(default=None, alias="existingContent")


class SummarizeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    summary: Optional[str] = None
    website_title: Optional[str] = Field(default=None, alias="websiteTitle")
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
