from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class ClassifyRequest(BaseModel):
    url: Optional[str] = None
    is_main_frame: bool = True


class HostActionModel(BaseModel):
    proceed: bool
    empty_response: bool
    notice: Optional[str] = None
    show_progress: bool
    hide_progress: bool


class ClassifyResponse(BaseModel):
    url: Optional[str] = None
    is_main_frame: bool
    disposition: str
    rule: str
    matched: Optional[str] = None
    action: HostActionModel


class BatchClassifyRequest(BaseModel):
    requests: List[ClassifyRequest] = Field(default_factory=list)
    journal: bool = False

    @model_validator(mode="after")
    def validate_size(self) -> "BatchClassifyRequest":
        if len(self.requests) > 500:
            raise ValueError("at most 500 requests per batch")
        return self


class BatchClassifyResponse(BaseModel):
    results: List[ClassifyResponse]
    journal_id: Optional[str] = None


class ConfigSummary(BaseModel):
    domain: str
    start_url: str
    allowed_domains: List[str]
    block_media: bool
    ad_blocker: bool
    ignore_ssl_errors: bool
    orientation: str
    force_portrait: bool
    force_landscape: bool
