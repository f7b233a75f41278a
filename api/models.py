"""Shared Pydantic models for API routers."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AddressModel(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


class ContactFormRequest(BaseModel):
    """Body of the new-contact form. Field checks run in build_draft."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: str = ""
    phone: str = ""
    company: Optional[str] = None
    job_title: Optional[str] = Field(None, alias="jobTitle")
    notes: Optional[str] = None
    avatar: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    address: Optional[AddressModel] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ContactPatchRequest(BaseModel):
    """Body of the edit form; only the fields sent are patched."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = Field(None, alias="jobTitle")
    notes: Optional[str] = None
    avatar: Optional[str] = None
    tags: Optional[List[str]] = None
    address: Optional[AddressModel] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)
