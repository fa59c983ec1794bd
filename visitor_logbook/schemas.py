from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum


# ==================== Enums ====================

class SexOption(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


# ==================== Backend Resources ====================

class Sex(BaseModel):
    id: int
    sex: str


class Visitor(BaseModel):
    """Visitor record as returned by the logbook API"""
    model_config = ConfigDict(extra="ignore")

    id: int
    firstname: str
    middlename: Optional[str] = None
    lastname: str
    age: int
    sex: Optional[str] = None  # Display value
    sex_id: Optional[int] = None
    sexes: List[Sex] = Field(default_factory=list)  # Relationship data
    purpose_of_visit: str = ""
    contact_number: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    time_out: Optional[datetime] = None

    @field_validator("time_out", "created_at", "updated_at", "middlename", "sex", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("contact_number", "purpose_of_visit", mode="before")
    @classmethod
    def coerce_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @property
    def is_active(self) -> bool:
        """A visitor is active until a sign-out time is recorded"""
        return self.time_out is None

    @property
    def display_sex(self) -> Optional[str]:
        if self.sexes:
            return self.sexes[0].sex
        return self.sex

    @property
    def full_name(self) -> str:
        parts = [self.firstname, self.middlename, self.lastname]
        return " ".join(p for p in parts if p)


class Admin(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VisitorEdit(BaseModel):
    """Payload of the visitor edit endpoint"""
    visitor: Visitor
    sexes: List[Sex] = Field(default_factory=list)


class AdminPanel(BaseModel):
    admins: List[Admin] = Field(default_factory=list)
    visitors: List[Visitor] = Field(default_factory=list)


# ==================== Form Schemas ====================

def _required(value: str, message: str) -> str:
    if not value:
        raise PydanticCustomError("required", message)
    return value


def _max_length(value: str, limit: int, message: str) -> str:
    if len(value) > limit:
        raise PydanticCustomError("too_long", message)
    return value


class VisitorForm(BaseModel):
    """Body for creating or updating a visitor"""
    model_config = ConfigDict(str_strip_whitespace=True, validate_default=True)

    firstname: str = ""
    middlename: Optional[str] = None
    lastname: str = ""
    age: int = 18
    sex: Optional[SexOption] = None
    contact_number: str = ""
    purpose_of_visit: str = ""

    @field_validator("firstname")
    @classmethod
    def check_firstname(cls, value: str) -> str:
        _required(value, "First name is required")
        return _max_length(value, 255, "First name too long")

    @field_validator("middlename")
    @classmethod
    def check_middlename(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        return _max_length(value, 255, "Middle name too long")

    @field_validator("lastname")
    @classmethod
    def check_lastname(cls, value: str) -> str:
        _required(value, "Last name is required")
        return _max_length(value, 255, "Last name too long")

    @field_validator("age")
    @classmethod
    def check_age(cls, value: int) -> int:
        if value < 1:
            raise PydanticCustomError("too_small", "Age must be at least 1")
        if value > 150:
            raise PydanticCustomError("too_large", "Age must be realistic")
        return value

    @field_validator("sex", mode="before")
    @classmethod
    def check_sex(cls, value):
        if value is None or value == "":
            raise PydanticCustomError("required", "Please select a gender")
        return value

    @field_validator("contact_number")
    @classmethod
    def check_contact_number(cls, value: str) -> str:
        return _required(value, "Contact number is required")

    @field_validator("purpose_of_visit")
    @classmethod
    def check_purpose(cls, value: str) -> str:
        _required(value, "Purpose of visit is required")
        return _max_length(value, 500, "Purpose too long")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class LoginForm(BaseModel):
    model_config = ConfigDict(validate_default=True)

    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _required(value.strip(), "Email or username is required")

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _required(value, "Password is required")


def form_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Group validation messages by field name"""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error.get("loc") else "form"
        errors.setdefault(field, []).append(error["msg"])
    return errors


# ==================== API Response ====================

class ApiResponse(BaseModel):
    """Uniform result of every API client call"""
    success: bool
    data: Any = None
    message: Optional[str] = None
    errors: Dict[str, List[str]] = Field(default_factory=dict)
