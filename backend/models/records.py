"""Structured resume and job records accepted in place of raw text."""

from datetime import date
from enum import Enum

from pydantic import BaseModel


class ContactInfo(BaseModel):
    first_name: str = ""
    last_name: str = ""
    headline: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""


class WorkExperience(BaseModel):
    """A single work experience entry. ``description`` may contain HTML."""
    company: str = ""
    job_title: str = ""
    location: str = ""
    start_date: date
    end_date: date | None = None
    current_job: bool = False
    description: str = ""


class Education(BaseModel):
    """A single education entry."""
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    location: str = ""
    start_date: date
    end_date: date | None = None
    description: str = ""


class SectionType(str, Enum):
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"


class ResumeSection(BaseModel):
    section_type: SectionType
    summary: str = ""
    work_experiences: list[WorkExperience] = []
    educations: list[Education] = []


class ResumeRecord(BaseModel):
    title: str = ""
    contact_info: ContactInfo | None = None
    sections: list[ResumeSection] = []


class JobRecord(BaseModel):
    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
