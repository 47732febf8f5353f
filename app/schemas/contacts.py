# app/schemas/contacts.py
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


# ===============================
# Resume sections (AI-only fields)
# ===============================

class ExperienceEntry(BaseModel):
    """
    One work-history item. The provider sends camelCase keys
    (startDate/endDate); python code uses snake_case.
    """
    company: str = ""
    position: str = ""
    start_date: str = Field(default="", alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    description: str = ""

    model_config = {"populate_by_name": True, "frozen": True}


class EducationEntry(BaseModel):
    institution: str = ""
    degree: str = ""
    field: str = ""
    graduation_date: str = Field(default="", alias="graduationDate")

    model_config = {"populate_by_name": True, "frozen": True}


# ===============================
# Contact records
# ===============================

class PartialContact(BaseModel):
    """
    What a single extraction source (regex heuristics or the language model)
    believes about the contact. Every field may be missing.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    summary: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("first_name", "last_name", "email", "phone", "summary", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        """Blank strings mean "not found"."""
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    def has_any(self) -> bool:
        return any([
            self.first_name, self.last_name, self.email, self.phone,
            self.skills, self.experience, self.education, self.summary,
        ])


class ExtractedContactInfo(PartialContact):
    """
    Final, reconciled record handed to the customer-creation flow.
    Built once per request and never modified afterwards.
    """


class CustomerDraft(BaseModel):
    """
    The customer the CRM would create from an inbound email with a resume.
    Returned to the caller; persisting it is someone else's job.
    """
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str = "lead"
    source: str = ""
    notes: str = ""
    resume_filename: Optional[str] = None
    resume_data: ExtractedContactInfo = Field(default_factory=ExtractedContactInfo)

    model_config = {"frozen": True}


# ===============================
# Request / Response Schemas
# ===============================

class ExtractTextRequest(BaseModel):
    text: str = ""
    # None -> decided by whether an API key is configured
    use_ai: Optional[bool] = Field(default=None, alias="useAi")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "text": "John Doe\nEmail: john.doe@example.com\nMobile: 912345678\n",
                    "useAi": False,
                }
            ]
        },
    }


class ExtractionResponse(BaseModel):
    ok: bool = True
    filename: Optional[str] = None
    contact: ExtractedContactInfo


class InboundEmailResponse(BaseModel):
    ok: bool = True
    attachment: str
    customer: CustomerDraft
