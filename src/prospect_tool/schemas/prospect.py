"""Prospect record schemas produced by the CSV import pipeline"""
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field, model_validator


class ProspectBase(BaseModel):
    created_by: int
    status: str = "new"
    
    company_name: Optional[str] = None
    company_domain: Optional[str] = None
    company_industry: Optional[str] = None
    company_size: Optional[str] = None
    company_location: Optional[str] = None
    company_linkedin: Optional[str] = None
    
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_title: Optional[str] = None
    contact_linkedin: Optional[str] = None
    
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    source: Optional[str] = None
    
    def to_row(self) -> dict:
        """Column values for insertion, unset fields omitted."""
        return self.model_dump(exclude_none=True)


class CompanyProspect(ProspectBase):
    prospect_type: Literal["company"] = "company"


class PersonProspect(ProspectBase):
    """A contact with no company attached."""
    prospect_type: Literal["person"] = "person"
    contact_name: str
    
    @model_validator(mode="after")
    def check_no_company(self) -> "PersonProspect":
        if self.company_name:
            raise ValueError("person prospects cannot carry a company_name")
        return self


ProspectRecord = Annotated[
    Union[CompanyProspect, PersonProspect],
    Field(discriminator="prospect_type"),
]

