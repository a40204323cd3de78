"""Prospect model - companies and contacts tracked through outreach"""
import enum
from datetime import datetime
from typing import List, Optional
from sqlalchemy import String, Integer, Text, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import Mapped, mapped_column

from src.prospect_tool.models.base import Base


class ProspectType(str, enum.Enum):
    COMPANY = "company"
    PERSON = "person"


class ProspectStatus(str, enum.Enum):
    NEW = "new"
    RESEARCHING = "researching"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    CONVERTED = "converted"
    DISQUALIFIED = "disqualified"


class Prospect(Base):
    __tablename__ = "prospects"
    
    id: Mapped[int] = mapped_column(primary_key=True)
    prospect_type: Mapped[str] = mapped_column(String(20), nullable=False, default=ProspectType.COMPANY.value)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ProspectStatus.NEW.value, index=True)
    
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company_domain: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    company_industry: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company_size: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    company_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company_linkedin: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    
    contact_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    contact_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_linkedin: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    
    tags: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )
