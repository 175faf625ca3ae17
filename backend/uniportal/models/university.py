"""
Pydantic models for university records.

Records come from an external ingestion process and are semi-structured:
every group is optional, unknown keys are preserved, and any value whose
shape differs from the typed field (a string where a list is expected, a
list of names where officer objects are expected) is passed through
unchanged instead of failing the response.
"""
from datetime import datetime
from typing import Annotated, Any, List, TypeVar, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, Strict

from .common import Envelope

T = TypeVar("T")

# Typed when the stored value conforms, raw otherwise (None included)
Lenient = Annotated[Union[T, Any], Field(union_mode="left_to_right")]

# Counts and years arrive as numbers or free text depending on the source;
# kept as stored
Count = Any


class RecordModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class Institution(RecordModel):
    """Identity group."""

    name: Lenient[str] = None
    short_name: Lenient[str] = None
    iau_id: Lenient[str] = None
    country_line: Lenient[str] = None
    updated_on: Lenient[Annotated[datetime, Strict()]] = None


class Address(RecordModel):
    street: Lenient[str] = None
    city: Lenient[str] = None
    province: Lenient[str] = None
    post_code: Lenient[str] = None
    country: Lenient[str] = None
    www: Lenient[str] = None


class GeneralInformation(RecordModel):
    type: Lenient[str] = None
    status: Lenient[str] = None
    established: Count = None
    institution_funding: Lenient[str] = None
    history: Lenient[str] = None
    student_body: Lenient[str] = None
    languages: Lenient[List[str]] = None
    accrediting_agency: Lenient[str] = None
    address: Lenient[Address] = None


class Officer(RecordModel):
    name: Lenient[str] = None
    role: Lenient[str] = None
    job_title: Lenient[str] = None


class Division(RecordModel):
    name: Lenient[str] = None
    unit_name: Lenient[str] = None
    unit_type: Lenient[str] = None
    fields_of_study: Lenient[List[str]] = None


class DegreeProgram(RecordModel):
    name: Lenient[str] = None
    degree: Lenient[str] = None
    fields_of_study: Lenient[List[str]] = None


class Degrees(RecordModel):
    programs: Lenient[List[DegreeProgram]] = None


class HeadCount(RecordModel):
    total: Count = None
    full_time_total: Count = None
    statistics_year: Count = None


class StudentStaffNumbers(RecordModel):
    total_students: Count = None
    students: Lenient[HeadCount] = None
    staff: Lenient[HeadCount] = None


class University(RecordModel):
    """A university record, full or projected.

    The store's native _id is exposed as ``id``.
    """

    id: Lenient[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    institution: Lenient[Institution] = None
    general_information: Lenient[GeneralInformation] = None
    officers: Lenient[List[Officer]] = None
    divisions: Lenient[List[Division]] = None
    degrees: Lenient[Union[Degrees, List[Any]]] = None
    student_staff_numbers: Lenient[StudentStaffNumbers] = None


class UniversityResponse(Envelope):
    data: University
