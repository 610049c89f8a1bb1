"""Request/response schemas used by the API.

`...In` schemas validate create payloads and reuse the field definitions
(and length/range constraints) of the model base classes. `...Update`
schemas make every field optional for PATCH requests; only the fields a
client actually sends are applied. `...Out` schemas add the identifier,
timestamps and derived fields such as related ids or stage/question
navigation.
"""

import uuid
from datetime import date, datetime
from typing import List, Optional

from sqlmodel import Field, SQLModel

from .models import (
    ActivityBase,
    CourseBase,
    EducationalOccupationalProgramBase,
    EducationEventBase,
    GroupBase,
    ParticipantBase,
    ParticipantStatus,
    ProgramBase,
    QuestionBase,
    ResultBase,
    ReviewBase,
    StageBase,
    TestBase,
)


class RecordOut(SQLModel):
    id: uuid.UUID
    date_created: datetime
    date_modified: datetime


class NavigationOut(SQLModel):
    """Position of an item inside its ordered container."""
    order_number: int
    start: bool
    end: bool
    previous_id: Optional[uuid.UUID] = None
    next_id: Optional[uuid.UUID] = None


# programs


class ProgramIn(ProgramBase):
    course_ids: List[uuid.UUID] = []


class ProgramUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    application_start_date: Optional[datetime] = None
    application_deadline: Optional[datetime] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    financial_aid_eligible: Optional[str] = Field(default=None, max_length=255)
    maximum_enrollment: Optional[int] = Field(default=None, ge=0)
    number_of_credits: Optional[int] = Field(default=None, ge=0)
    occupational_category: Optional[str] = Field(default=None, max_length=255)
    occupational_credential_awarded: Optional[str] = Field(default=None, max_length=255)
    educational_credential_awarded: Optional[str] = Field(default=None, max_length=255)
    educational_program_mode: Optional[str] = Field(default=None, max_length=255)
    offers: Optional[str] = Field(default=None, max_length=255)
    program_prerequisites: Optional[List[str]] = None
    program_type: Optional[str] = Field(default=None, max_length=255)
    provider: Optional[str] = Field(default=None, max_length=255)
    salary_upon_completion: Optional[str] = Field(default=None, max_length=255)
    term_duration: Optional[str] = Field(default=None, max_length=255)
    terms_per_year: Optional[int] = Field(default=None, ge=0)
    day_of_week: Optional[str] = Field(default=None, max_length=255)
    time_of_day: Optional[str] = Field(default=None, max_length=255)
    time_to_complete: Optional[str] = Field(default=None, max_length=255)
    training_salary: Optional[str] = Field(default=None, max_length=255)
    typical_credits_per_term: Optional[int] = Field(default=None, ge=0)
    course_ids: Optional[List[uuid.UUID]] = None


class ProgramOut(ProgramBase, RecordOut):
    course_ids: List[uuid.UUID] = []


class EducationalOccupationalProgramIn(EducationalOccupationalProgramBase):
    pass


class EducationalOccupationalProgramUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    application_start_date: Optional[date] = None
    application_deadline: Optional[date] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    financial_aid_eligible: Optional[str] = Field(default=None, max_length=255)
    maximum_enrollment: Optional[int] = Field(default=None, ge=0)
    number_of_credits: Optional[int] = Field(default=None, ge=0)
    occupational_category: Optional[str] = Field(default=None, max_length=255)
    occupational_credential_awarded: Optional[str] = Field(default=None, max_length=255)
    educational_credential_awarded: Optional[str] = Field(default=None, max_length=255)
    educational_program_mode: Optional[str] = Field(default=None, max_length=255)
    offers: Optional[str] = Field(default=None, max_length=255)
    program_prerequisites: Optional[str] = Field(default=None, max_length=255)
    program_type: Optional[str] = Field(default=None, max_length=255)
    provider: Optional[str] = Field(default=None, max_length=255)
    salary_upon_completion: Optional[str] = Field(default=None, max_length=255)
    term_duration: Optional[str] = Field(default=None, max_length=255)
    terms_per_year: Optional[int] = Field(default=None, ge=0)
    day_of_week: Optional[str] = Field(default=None, max_length=255)
    time_of_day: Optional[str] = Field(default=None, max_length=255)
    time_to_complete: Optional[str] = Field(default=None, max_length=255)
    training_salary: Optional[str] = Field(default=None, max_length=255)
    typical_credits_per_term: Optional[int] = Field(default=None, ge=0)


class EducationalOccupationalProgramOut(EducationalOccupationalProgramBase, RecordOut):
    pass


# courses and their content


class CourseIn(CourseBase):
    pass


class CourseUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    organization: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    text: Optional[str] = None
    course_code: Optional[str] = Field(default=None, max_length=255)
    course_prerequisites: Optional[List[str]] = None
    has_course_instance: Optional[str] = Field(default=None, max_length=255)
    number_of_credits: Optional[int] = Field(default=None, ge=0)
    occupational_credential_awarded: Optional[str] = Field(default=None, max_length=255)
    educational_credential_awarded: Optional[str] = Field(default=None, max_length=255)
    skills: Optional[List[str]] = None
    competences: Optional[List[str]] = None
    products: Optional[List[str]] = None
    additional_type: Optional[str] = Field(default=None, max_length=255)
    video: Optional[str] = Field(default=None, max_length=255)
    time_required: Optional[str] = Field(default=None, max_length=255)


class CourseOut(CourseBase, RecordOut):
    program_ids: List[uuid.UUID] = []


class ActivityIn(ActivityBase):
    pass


class ActivityUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    needs_review: Optional[bool] = None
    educational_use: Optional[str] = Field(default=None, max_length=255)
    course_id: Optional[uuid.UUID] = None


class ActivityOut(ActivityBase, RecordOut):
    pass


class TestIn(TestBase):
    pass


class TestUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    activity_id: Optional[uuid.UUID] = None


class TestOut(TestBase, RecordOut):
    stage_count: int = 0


class StageIn(StageBase):
    pass


class StageUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    test_id: Optional[uuid.UUID] = None
    order_number: Optional[int] = Field(default=None, ge=1)


class StageOut(NavigationOut, StageBase, RecordOut):
    order_number: int
    question_count: int = 0


class QuestionIn(QuestionBase):
    pass


class QuestionUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    answer: Optional[str] = Field(default=None, max_length=255)
    answer_options: Optional[List[str]] = None
    stage_id: Optional[uuid.UUID] = None
    order_number: Optional[int] = Field(default=None, ge=1)


class QuestionOut(NavigationOut, QuestionBase, RecordOut):
    order_number: int


# enrollment


class GroupIn(GroupBase):
    pass


class GroupUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    course_id: Optional[uuid.UUID] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    min_participations: Optional[int] = Field(default=None, ge=0)
    max_participations: Optional[int] = Field(default=None, ge=0)
    mentors: Optional[List[str]] = None


class GroupOut(GroupBase, RecordOut):
    participant_count: int = 0


class ParticipantIn(ParticipantBase):
    pass


class ParticipantUpdate(SQLModel):
    person: Optional[str] = Field(default=None, max_length=255)
    program_id: Optional[uuid.UUID] = None
    course_id: Optional[uuid.UUID] = None
    status: Optional[ParticipantStatus] = None
    date_of_acceptance: Optional[datetime] = None
    motivation: Optional[str] = Field(default=None, max_length=255)
    participant_group_id: Optional[uuid.UUID] = None


class ParticipantOut(ParticipantBase, RecordOut):
    pass


class EducationEventIn(EducationEventBase):
    participant_ids: List[uuid.UUID] = []


class EducationEventUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    assesses: Optional[str] = Field(default=None, max_length=255)
    educational_level: Optional[str] = Field(default=None, max_length=255)
    teaches: Optional[str] = Field(default=None, max_length=255)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    organizer: Optional[str] = Field(default=None, max_length=255)
    course_id: Optional[uuid.UUID] = None
    participant_ids: Optional[List[uuid.UUID]] = None


class EducationEventOut(EducationEventBase, RecordOut):
    participant_ids: List[uuid.UUID] = []


class ResultIn(ResultBase):
    pass


class ResultUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    participant_id: Optional[uuid.UUID] = None
    activity_id: Optional[uuid.UUID] = None


class ResultOut(ResultBase, RecordOut):
    pass


class ReviewIn(ReviewBase):
    pass


class ReviewUpdate(SQLModel):
    result_id: Optional[uuid.UUID] = None
    body: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class ReviewOut(ReviewBase, RecordOut):
    pass
