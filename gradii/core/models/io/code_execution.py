"""
Code execution I/O models for API requests and responses.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ExecuteCodeRequest(BaseModel):
    """Schema for running a snippet through the sandbox."""

    language: str = Field(min_length=1, description="java, python, cpp or php")
    code: str = Field(min_length=1, description="Source code to run")
    input: str = Field(default="", description="Data passed on stdin")


class ExecuteCodeResponse(BaseModel):
    success: bool
    output: str
    error: str
    exit_code: Optional[int] = None
    language: str
    version: str


class ExecutionStatusResponse(BaseModel):
    status: str
    supported_languages: List[str]
    runtime_count: Optional[int] = None
