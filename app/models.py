from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SourceRecord(BaseModel):
    """One item of an upstream collection; extra fields are kept as attributes."""

    model_config = ConfigDict(extra="allow")

    id: int


class JoinedRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    title: str
    body: str

    def as_csv_row(self) -> tuple[str, str, str]:
        return (self.name, self.title, self.body)


class GenerateCsvResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    file_path: str = Field(alias="filePath")
    record_count: int = Field(alias="recordCount", examples=[100])
    timestamp: str = Field(examples=["2024-01-02T03-04-05-678Z"])


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    ok: bool = True
