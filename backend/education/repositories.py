"""Repository classes encapsulating database operations.

`Repository` carries the CRUD operations shared by every table; the
subclasses bind it to one model and add the list filters exposed by the
matching collection endpoint. Repositories return SQLModel objects and
perform commits/refreshes where appropriate.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import String, cast, func
from sqlmodel import Session, select

from . import models


class Repository:
    """CRUD operations shared by all table repositories."""
    model = None

    def __init__(self, session: Session):
        self.session = session

    def get(self, record_id: uuid.UUID):
        """Fetch a row by primary key, or `None`."""
        return self.session.get(self.model, record_id)

    def save(self, obj):
        """Persist a new or modified instance and return it refreshed."""
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj) -> None:
        self.session.delete(obj)
        self.session.commit()

    def list(self, *criteria, offset: int = 0, limit: Optional[int] = None, order_by=None) -> list:
        """Return rows matching all `criteria`, oldest first unless `order_by` is given."""
        stmt = select(self.model)
        for c in criteria:
            stmt = stmt.where(c)
        stmt = stmt.order_by(order_by if order_by is not None else self.model.date_created)
        stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.exec(stmt).all())


def _iexact(column, value: str):
    return func.lower(column) == value.lower()


class ProgramRepository(Repository):
    model = models.Program

    def search(self, provider: Optional[str] = None, **page) -> List[models.Program]:
        """List programs, optionally by provider (case-insensitive exact match)."""
        criteria = []
        if provider is not None:
            criteria.append(_iexact(models.Program.provider, provider))
        return self.list(*criteria, **page)


class EducationalOccupationalProgramRepository(Repository):
    model = models.EducationalOccupationalProgram

    def search(self, provider: Optional[str] = None, **page) -> List[models.EducationalOccupationalProgram]:
        criteria = []
        if provider is not None:
            criteria.append(_iexact(models.EducationalOccupationalProgram.provider, provider))
        return self.list(*criteria, **page)


class CourseRepository(Repository):
    model = models.Course

    def search(self, additional_type: Optional[str] = None, organization: Optional[str] = None, **page) -> List[models.Course]:
        """List courses filtered by type and/or submitting organization."""
        criteria = []
        if additional_type is not None:
            criteria.append(_iexact(models.Course.additional_type, additional_type))
        if organization is not None:
            criteria.append(_iexact(models.Course.organization, organization))
        return self.list(*criteria, **page)


class ActivityRepository(Repository):
    model = models.Activity

    def search(self, course_id: Optional[uuid.UUID] = None, **page) -> List[models.Activity]:
        criteria = []
        if course_id is not None:
            criteria.append(models.Activity.course_id == course_id)
        return self.list(*criteria, **page)


class TestRepository(Repository):
    model = models.Test

    def search(self, activity_id: Optional[uuid.UUID] = None, **page) -> List[models.Test]:
        criteria = []
        if activity_id is not None:
            criteria.append(models.Test.activity_id == activity_id)
        return self.list(*criteria, **page)


class StageRepository(Repository):
    model = models.Stage

    def search(self, test_id: Optional[uuid.UUID] = None, **page) -> List[models.Stage]:
        """List stages; within one test they come back in position order."""
        if test_id is not None:
            return self.list(models.Stage.test_id == test_id, order_by=models.Stage.order_number, **page)
        return self.list(**page)


class QuestionRepository(Repository):
    model = models.Question

    def search(self, stage_id: Optional[uuid.UUID] = None, **page) -> List[models.Question]:
        if stage_id is not None:
            return self.list(models.Question.stage_id == stage_id, order_by=models.Question.order_number, **page)
        return self.list(**page)


class GroupRepository(Repository):
    model = models.Group

    def search(
        self,
        course_id: Optional[uuid.UUID] = None,
        mentor: Optional[str] = None,
        start_after: Optional[datetime] = None,
        end_before: Optional[datetime] = None,
        **page,
    ) -> List[models.Group]:
        """List groups by course, mentor (partial match) and date window."""
        criteria = []
        if course_id is not None:
            criteria.append(models.Group.course_id == course_id)
        if mentor:
            # mentors is a JSON array; match against its serialized text
            criteria.append(func.lower(cast(models.Group.mentors, String)).contains(mentor.lower()))
        if start_after is not None:
            criteria.append(models.Group.start_date >= models.as_utc(start_after))
        if end_before is not None:
            criteria.append(models.Group.end_date <= models.as_utc(end_before))
        return self.list(*criteria, **page)

    def count_members(self, group_id: uuid.UUID, exclude: Optional[uuid.UUID] = None) -> int:
        """Number of participants currently assigned to `group_id`."""
        stmt = select(func.count()).select_from(models.Participant).where(
            models.Participant.participant_group_id == group_id
        )
        if exclude is not None:
            stmt = stmt.where(models.Participant.id != exclude)
        return self.session.exec(stmt).one()


class ParticipantRepository(Repository):
    model = models.Participant

    def search(
        self,
        person: Optional[str] = None,
        course_id: Optional[uuid.UUID] = None,
        program_id: Optional[uuid.UUID] = None,
        status: Optional[models.ParticipantStatus] = None,
        participant_group_id: Optional[uuid.UUID] = None,
        newest_first: bool = False,
        **page,
    ) -> List[models.Participant]:
        criteria = []
        if person is not None:
            criteria.append(models.Participant.person == person)
        if course_id is not None:
            criteria.append(models.Participant.course_id == course_id)
        if program_id is not None:
            criteria.append(models.Participant.program_id == program_id)
        if status is not None:
            criteria.append(models.Participant.status == status)
        if participant_group_id is not None:
            criteria.append(models.Participant.participant_group_id == participant_group_id)
        order_by = models.Participant.date_created.desc() if newest_first else None
        return self.list(*criteria, order_by=order_by, **page)


class EducationEventRepository(Repository):
    model = models.EducationEvent

    def search(self, course_id: Optional[uuid.UUID] = None, **page) -> List[models.EducationEvent]:
        criteria = []
        if course_id is not None:
            criteria.append(models.EducationEvent.course_id == course_id)
        return self.list(*criteria, **page)


class ResultRepository(Repository):
    model = models.Result

    def search(self, participant_id: Optional[uuid.UUID] = None, activity_id: Optional[uuid.UUID] = None, **page) -> List[models.Result]:
        criteria = []
        if participant_id is not None:
            criteria.append(models.Result.participant_id == participant_id)
        if activity_id is not None:
            criteria.append(models.Result.activity_id == activity_id)
        return self.list(*criteria, **page)


class ReviewRepository(Repository):
    model = models.Review

    def search(self, result_id: Optional[uuid.UUID] = None, **page) -> List[models.Review]:
        criteria = []
        if result_id is not None:
            criteria.append(models.Review.result_id == result_id)
        return self.list(*criteria, **page)
