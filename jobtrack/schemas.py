"""
Request and response bodies of the JobTrack API.

Application status and work type are validated against the current
vocabulary on the way in, but returned as plain strings because rows
restored from older backups can hold legacy spellings.
"""
from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator, model_validator
from datetime import date, datetime
from typing import Optional, List, Literal
from enum import Enum
from urllib.parse import urlsplit

from .services.salary import parse_salary_range, parse_salary_expectation


# --- Vocabularies ---

class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    TEST_CASE = "test_case"
    HR_INTERVIEW = "hr_interview"
    TECHNICAL_INTERVIEW = "technical_interview"
    MANAGEMENT_INTERVIEW = "management_interview"
    OFFER = "offer"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class WorkType(str, Enum):
    REMOTE = "remote"
    HYBRID = "hybrid"
    ONSITE = "onsite"


class Language(str, Enum):
    EN = "en"
    TR = "tr"


# --- Shared field checks ---

def validate_url(url: Optional[str]) -> Optional[str]:
    """Blank becomes None; anything else must be an absolute http(s) URL."""
    if not url or not url.strip():
        return None
    url = url.strip()
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.hostname or " " in url:
        raise ValueError("Job posting URL must be an http(s) link")
    return url


def normalize_skills(skills: Optional[List[str]]) -> List[str]:
    """Trim entries, drop blanks, and keep the first occurrence of each skill."""
    result = []
    for skill in skills or []:
        cleaned = skill.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result


# --- Contacts ---

class ContactBase(BaseModel):
    """Someone met during an application: recruiter, interviewer, hiring manager."""
    name: str = Field(..., min_length=1, max_length=200)
    role: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    linkedin: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator('email', mode='before')
    @classmethod
    def blank_email_is_none(cls, v):
        return v or None


class ContactCreate(ContactBase):
    pass


class ContactResponse(ContactBase):
    id: int

    class Config:
        from_attributes = True


# --- Salaries ---

class SalaryRange(BaseModel):
    currency: str
    min: str = ""
    max: str = ""


class SalaryExpectation(BaseModel):
    currency: str
    amount: str = ""


# --- Applications ---

class SalaryInputMixin(BaseModel):
    """
    Structured salary input.

    When any of these are sent, they are formatted into the stored
    company_salary_range / salary_expectation strings.
    """
    salary_range_currency: Optional[str] = Field(None, max_length=3)
    salary_range_min: Optional[str] = Field(None, max_length=30)
    salary_range_max: Optional[str] = Field(None, max_length=30)
    salary_expectation_currency: Optional[str] = Field(None, max_length=3)
    salary_expectation_amount: Optional[str] = Field(None, max_length=30)


class ApplicationBase(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    company_location: Optional[str] = Field(None, max_length=200)
    company_industry: Optional[str] = Field(None, max_length=100)
    company_salary_range: Optional[str] = Field(None, max_length=100)
    position: str = Field(..., min_length=1, max_length=200)
    skills: List[str] = []
    application_date: Optional[date] = None
    cover_letter: Optional[str] = Field(None, max_length=20000)
    salary_expectation: Optional[str] = Field(None, max_length=100)
    job_posting_url: Optional[str] = Field(None, max_length=1000)
    job_posting_content: Optional[str] = Field(None, max_length=50000)
    source: Optional[str] = Field("LinkedIn", max_length=100)
    work_type: WorkType = WorkType.REMOTE
    status: ApplicationStatus = ApplicationStatus.APPLIED
    notes: Optional[str] = Field(None, max_length=20000)

    @field_validator('job_posting_url')
    @classmethod
    def validate_job_posting_url(cls, v):
        return validate_url(v)

    @field_validator('skills')
    @classmethod
    def validate_skills(cls, v):
        return normalize_skills(v)


class ApplicationCreate(SalaryInputMixin, ApplicationBase):
    contacts: List[ContactCreate] = []


class ApplicationUpdate(SalaryInputMixin):
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    company_location: Optional[str] = Field(None, max_length=200)
    company_industry: Optional[str] = Field(None, max_length=100)
    company_salary_range: Optional[str] = Field(None, max_length=100)
    position: Optional[str] = Field(None, min_length=1, max_length=200)
    skills: Optional[List[str]] = None
    application_date: Optional[date] = None
    cover_letter: Optional[str] = Field(None, max_length=20000)
    salary_expectation: Optional[str] = Field(None, max_length=100)
    job_posting_url: Optional[str] = Field(None, max_length=1000)
    job_posting_content: Optional[str] = Field(None, max_length=50000)
    source: Optional[str] = Field(None, max_length=100)
    work_type: Optional[WorkType] = None
    status: Optional[ApplicationStatus] = None
    notes: Optional[str] = Field(None, max_length=20000)
    contacts: Optional[List[ContactCreate]] = None

    # Omitting these leaves them unchanged; an explicit null is refused
    @field_validator('company_name', 'position', 'status', 'contacts')
    @classmethod
    def reject_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator('job_posting_url')
    @classmethod
    def validate_job_posting_url(cls, v):
        return validate_url(v)

    @field_validator('skills')
    @classmethod
    def validate_skills(cls, v):
        return None if v is None else normalize_skills(v)


class ApplicationResponse(BaseModel):
    id: int
    company_name: str
    company_location: Optional[str] = None
    company_industry: Optional[str] = None
    company_salary_range: Optional[str] = None
    position: str
    skills: List[str] = []
    application_date: Optional[date] = None
    cover_letter: Optional[str] = None
    salary_expectation: Optional[str] = None
    job_posting_url: Optional[str] = None
    job_posting_content: Optional[str] = None
    source: Optional[str] = None
    # Plain strings: rows imported from older backups may hold legacy spellings
    work_type: Optional[str] = None
    status: str
    notes: Optional[str] = None
    is_pinned: bool = False
    contacts: List[ContactResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None
    salary_range: Optional[SalaryRange] = None
    salary_expectation_parsed: Optional[SalaryExpectation] = None

    class Config:
        from_attributes = True

    @field_validator('skills', mode='before')
    @classmethod
    def coerce_skills(cls, v):
        return v or []

    @model_validator(mode='after')
    def fill_salary_structures(self):
        if self.company_salary_range:
            self.salary_range = SalaryRange(**parse_salary_range(self.company_salary_range)._asdict())
        if self.salary_expectation:
            self.salary_expectation_parsed = SalaryExpectation(
                **parse_salary_expectation(self.salary_expectation)._asdict()
            )
        return self


class StatusChange(BaseModel):
    status: ApplicationStatus


class NoteCreate(BaseModel):
    note: str = Field(..., max_length=5000)


# --- Analytics ---

class ChartSlice(BaseModel):
    """One slice of a pie chart: label, count, and display color."""
    name: str
    value: int
    color: str


class WeeklyActivityPoint(BaseModel):
    name: str
    applications: int


class AnalyticsSummary(BaseModel):
    """
    Dashboard analytics.

    Serialized with camelCase keys (totalApplications, statusDistribution, ...);
    constructed in Python with the snake_case field names.
    """
    total_applications: int = Field(0, alias="totalApplications")
    total_interviews: int = Field(0, alias="totalInterviews")
    total_offers: int = Field(0, alias="totalOffers")
    response_rate: int = Field(0, alias="responseRate")
    status_distribution: List[ChartSlice] = Field(default_factory=list, alias="statusDistribution")
    weekly_activity: List[WeeklyActivityPoint] = Field(default_factory=list, alias="weeklyActivity")
    work_type_distribution: List[ChartSlice] = Field(default_factory=list, alias="workTypeDistribution")

    class Config:
        populate_by_name = True


# --- Skill autocomplete ---

class SkillSuggestionResponse(BaseModel):
    label: str

    class Config:
        from_attributes = True


# --- Settings ---

class SettingsResponse(BaseModel):
    language: Language
    custom_sources: List[str]
    custom_industries: List[str]
    all_sources: List[str]
    all_industries: List[str]


class SettingsUpdate(BaseModel):
    language: Optional[Language] = None
    custom_sources: Optional[List[str]] = None
    custom_industries: Optional[List[str]] = None


# --- Backups ---

class ImportResult(BaseModel):
    applications_imported: int = 0
    settings_imported: bool = False
    errors: List[str] = []


class BackupSettings(BaseModel):
    language: Optional[Language] = None
    custom_sources: List[str] = []
    custom_industries: List[str] = []


class BackupFile(BaseModel):
    """Shape of an exported backup; both keys are required for import."""
    applications: List[dict]
    settings: BackupSettings
    exportedAt: Optional[str] = None


class ClearResult(BaseModel):
    deleted: int
    scope: Literal["applications"] = "applications"
