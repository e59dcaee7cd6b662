"""Restructured job description: titled paragraph / list sections."""

from typing import Literal

from pydantic import BaseModel


class DescriptionSection(BaseModel):
    title: str
    type: Literal["paragraph", "list"] = "paragraph"
    content: str | list[str] = ""


class StructuredDescription(BaseModel):
    sections: list[DescriptionSection] = []
