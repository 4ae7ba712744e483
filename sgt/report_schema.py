# Pydantic-модели JSON-вывода CLI (render --report, keys).

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class DiagnosticKindModel(Enum):
    ATTRIBUTE = "attribute"
    INCLUDE = "include"
    LIST_TYPE = "list_type"


class DiagnosticModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: DiagnosticKindModel
    message: str
    target: str = Field(..., description="Dotted path or template name")
    line: int = Field(..., ge=0)
    column: int = Field(..., ge=0)


class RenderReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    template: str
    locale: str
    domain: str
    text: str
    diagnostics: List[DiagnosticModel]


class KeyEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    file: str
    key: str
    line: int = Field(..., ge=1)


class KeysReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    keys: List[KeyEntry]
