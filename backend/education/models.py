"""SQLModel data models.

This module defines the catalogue tables (programs, courses, activities,
tests with their stages and questions) and the enrollment tables
(participants, groups, education events, results and reviews).

Each entity is split the usual SQLModel way: a `...Base` class carrying the
writable fields and their validation constraints, and a table class adding
the primary key, timestamps and relationships. The request schemas in
`schemas.py` reuse the base classes.

`Test` and `Stage` are ordered containers: they expose `ordered_items()`
so the navigation helpers in `utils.ordering` can walk their children.
"""

import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Text, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value):
    """Return datetimes in UTC; naive values are taken as UTC already."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return value


class Record(SQLModel):
    """Identifier and bookkeeping timestamps shared by every table."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    date_created: datetime = Field(default_factory=utcnow)
    date_modified: datetime = Field(default_factory=utcnow)


class ParticipantStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


# link tables


class ProgramCourseLink(SQLModel, table=True):
    program_id: uuid.UUID = Field(foreign_key="program.id", primary_key=True)
    course_id: uuid.UUID = Field(foreign_key="course.id", primary_key=True)


class EducationEventParticipantLink(SQLModel, table=True):
    education_event_id: uuid.UUID = Field(foreign_key="educationevent.id", primary_key=True)
    participant_id: uuid.UUID = Field(foreign_key="participant.id", primary_key=True)


# programs


class ProgramDetails(SQLModel):
    """Descriptive fields common to both program flavours."""
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
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
    program_type: Optional[str] = Field(default=None, max_length=255)
    provider: Optional[str] = Field(default=None, max_length=255, index=True)
    salary_upon_completion: Optional[str] = Field(default=None, max_length=255)
    term_duration: Optional[str] = Field(default=None, max_length=255)
    terms_per_year: Optional[int] = Field(default=None, ge=0)
    day_of_week: Optional[str] = Field(default=None, max_length=255)
    time_of_day: Optional[str] = Field(default=None, max_length=255)
    time_to_complete: Optional[str] = Field(default=None, max_length=255)
    training_salary: Optional[str] = Field(default=None, max_length=255)
    typical_credits_per_term: Optional[int] = Field(default=None, ge=0)


class ProgramBase(ProgramDetails):
    application_start_date: Optional[datetime] = None
    application_deadline: Optional[datetime] = None
    program_prerequisites: Optional[List[str]] = Field(default=None, sa_type=JSON)


class Program(ProgramBase, Record, table=True):
    """An educational program bundling several courses."""
    courses: List["Course"] = Relationship(back_populates="programs", link_model=ProgramCourseLink)
    participants: List["Participant"] = Relationship(
        back_populates="program",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class EducationalOccupationalProgramBase(ProgramDetails):
    application_start_date: Optional[date] = None
    application_deadline: Optional[date] = None
    program_prerequisites: Optional[str] = Field(default=None, max_length=255)


class EducationalOccupationalProgram(EducationalOccupationalProgramBase, Record, table=True):
    """Standalone schema.org style program record (no course links)."""


# courses and their content


class CourseBase(SQLModel):
    name: str = Field(max_length=255)
    organization: str = Field(max_length=255, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    text: Optional[str] = Field(default=None, sa_type=Text)
    course_code: Optional[str] = Field(default=None, max_length=255)
    course_prerequisites: Optional[List[str]] = Field(default=None, sa_type=JSON)
    has_course_instance: Optional[str] = Field(default=None, max_length=255)
    number_of_credits: Optional[int] = Field(default=None, ge=0)
    occupational_credential_awarded: Optional[str] = Field(default=None, max_length=255)
    educational_credential_awarded: Optional[str] = Field(default=None, max_length=255)
    skills: Optional[List[str]] = Field(default=None, sa_type=JSON)
    competences: Optional[List[str]] = Field(default=None, sa_type=JSON)
    products: Optional[List[str]] = Field(default=None, sa_type=JSON)
    additional_type: Optional[str] = Field(default=None, max_length=255, index=True)
    video: Optional[str] = Field(default=None, max_length=255)
    time_required: Optional[str] = Field(default=None, max_length=255)


class Course(CourseBase, Record, table=True):
    programs: List[Program] = Relationship(back_populates="courses", link_model=ProgramCourseLink)
    activities: List["Activity"] = Relationship(
        back_populates="course",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    education_events: List["EducationEvent"] = Relationship(
        back_populates="course",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    participants: List["Participant"] = Relationship(back_populates="course")
    groups: List["Group"] = Relationship(back_populates="course")


class ActivityBase(SQLModel):
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    needs_review: bool = False
    educational_use: Optional[str] = Field(default=None, max_length=255)
    course_id: uuid.UUID = Field(foreign_key="course.id", index=True)


class Activity(ActivityBase, Record, table=True):
    """Something a participant does within a course; may hold tests."""
    course: Optional[Course] = Relationship(back_populates="activities")
    tests: List["Test"] = Relationship(
        back_populates="activity",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    results: List["Result"] = Relationship(
        back_populates="activity",
        sa_relationship_kwargs={"cascade": "all"},
    )


class TestBase(SQLModel):
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    activity_id: uuid.UUID = Field(foreign_key="activity.id", index=True)


class Test(TestBase, Record, table=True):
    """A test made of ordered stages."""
    activity: Optional[Activity] = Relationship(back_populates="tests")
    stages: List["Stage"] = Relationship(
        back_populates="test",
        sa_relationship_kwargs={"order_by": "Stage.order_number", "cascade": "all, delete-orphan"},
    )

    def ordered_items(self) -> List["Stage"]:
        return self.stages


class StageBase(SQLModel):
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    test_id: uuid.UUID = Field(foreign_key="test.id", index=True)
    order_number: Optional[int] = None


class Stage(StageBase, Record, table=True):
    """A stage within a test; itself an ordered list of questions."""
    __table_args__ = (UniqueConstraint("test_id", "order_number"),)

    test: Optional[Test] = Relationship(back_populates="stages")
    questions: List["Question"] = Relationship(
        back_populates="stage",
        sa_relationship_kwargs={"order_by": "Question.order_number", "cascade": "all, delete-orphan"},
    )

    def ordered_items(self) -> List["Question"]:
        return self.questions

    def ordered_container(self) -> Optional[Test]:
        return self.test


class QuestionBase(SQLModel):
    name: str = Field(max_length=255)
    description: str = Field(max_length=255)
    answer: str = Field(max_length=255)
    answer_options: Optional[List[str]] = Field(default=None, sa_type=JSON)
    stage_id: uuid.UUID = Field(foreign_key="stage.id", index=True)
    order_number: Optional[int] = None


class Question(QuestionBase, Record, table=True):
    __table_args__ = (UniqueConstraint("stage_id", "order_number"),)

    stage: Optional[Stage] = Relationship(back_populates="questions")

    def ordered_container(self) -> Optional[Stage]:
        return self.stage


# enrollment


class GroupBase(SQLModel):
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    course_id: Optional[uuid.UUID] = Field(default=None, foreign_key="course.id", index=True)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    min_participations: Optional[int] = Field(default=None, ge=0)
    max_participations: Optional[int] = Field(default=None, ge=0)
    mentors: Optional[List[str]] = Field(default=None, sa_type=JSON)


class Group(GroupBase, Record, table=True):
    """A cohort of participants following a course together."""
    __tablename__ = "group_table"

    course: Optional[Course] = Relationship(back_populates="groups")
    participants: List["Participant"] = Relationship(back_populates="participant_group")


class ParticipantBase(SQLModel):
    person: str = Field(max_length=255, index=True)
    program_id: Optional[uuid.UUID] = Field(default=None, foreign_key="program.id", index=True)
    course_id: Optional[uuid.UUID] = Field(default=None, foreign_key="course.id", index=True)
    status: Optional[ParticipantStatus] = None
    date_of_acceptance: Optional[datetime] = None
    motivation: Optional[str] = Field(default=None, max_length=255)
    participant_group_id: Optional[uuid.UUID] = Field(default=None, foreign_key="group_table.id", index=True)


class Participant(ParticipantBase, Record, table=True):
    """A person enrolled in a program and/or course."""
    program: Optional[Program] = Relationship(back_populates="participants")
    course: Optional[Course] = Relationship(back_populates="participants")
    participant_group: Optional[Group] = Relationship(back_populates="participants")
    results: List["Result"] = Relationship(
        back_populates="participant",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    education_events: List["EducationEvent"] = Relationship(
        back_populates="participants", link_model=EducationEventParticipantLink
    )


class EducationEventBase(SQLModel):
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    assesses: Optional[str] = Field(default=None, max_length=255)
    educational_level: Optional[str] = Field(default=None, max_length=255)
    teaches: Optional[str] = Field(default=None, max_length=255)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    organizer: Optional[str] = Field(default=None, max_length=255)
    course_id: Optional[uuid.UUID] = Field(default=None, foreign_key="course.id", index=True)


class EducationEvent(EducationEventBase, Record, table=True):
    course: Optional[Course] = Relationship(back_populates="education_events")
    participants: List[Participant] = Relationship(
        back_populates="education_events", link_model=EducationEventParticipantLink
    )


class ResultBase(SQLModel):
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
    participant_id: uuid.UUID = Field(foreign_key="participant.id", index=True)
    activity_id: uuid.UUID = Field(foreign_key="activity.id", index=True)


class Result(ResultBase, Record, table=True):
    """Outcome of a participant's activity; reviews attach here."""
    participant: Optional[Participant] = Relationship(back_populates="results")
    activity: Optional[Activity] = Relationship(back_populates="results")
    reviews: List["Review"] = Relationship(
        back_populates="result",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class ReviewBase(SQLModel):
    result_id: uuid.UUID = Field(foreign_key="result.id", index=True)
    body: Optional[str] = Field(default=None, sa_type=Text)
    rating: Optional[int] = Field(default=None, ge=1, le=5)


class Review(ReviewBase, Record, table=True):
    result: Optional[Result] = Relationship(back_populates="reviews")
