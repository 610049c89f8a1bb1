"""Business logic services used by HTTP controllers.

Each service coordinates one repository: it builds table rows from the
validated request schemas, checks references and domain rules, and
persists the result. Services raise `NotFoundError` when the addressed
record does not exist and `ValueError` (or its subclass
`PositionConflictError`) when a request breaks a rule; controllers turn
those into 404/400/409 responses.

Stages and questions are placed in their test/stage through
`utils.ordering`, which also computes the start/end/previous/next fields
rendered on their representations.
"""

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlmodel import Session, SQLModel, select

from . import models, repositories, schemas
from .models import as_utc, utcnow
from .utils import ordering

logger = logging.getLogger("education.services")


class NotFoundError(LookupError):
    """The addressed record does not exist."""


class PositionConflictError(ValueError):
    """An explicit position is already used inside the container."""


class Edge(str, Enum):
    first = "first"
    last = "last"


class Direction(str, Enum):
    previous = "previous"
    next = "next"


def _naive(value):
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _check_range(start, end, label: str) -> None:
    if start is not None and end is not None and _naive(start) > _naive(end):
        raise ValueError(f"{label} must not be after its end")


def _aware_values(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: as_utc(value) for key, value in data.items()}


class RecordService:
    """Create/read/update/delete for one resource.

    Subclasses set `repository_cls` and `label`, list request fields that
    are not table columns in `link_fields`, and hook into `_apply_links`
    and `_validate`.
    """
    repository_cls = repositories.Repository
    label = "record"
    link_fields: set = set()

    def __init__(self, session: Session):
        self.session = session
        self.repo = self.repository_cls(session)

    def get(self, record_id: uuid.UUID):
        obj = self.repo.get(record_id)
        if obj is None:
            raise NotFoundError(f"{self.label} not found: {record_id}")
        return obj

    def search(self, **filters) -> list:
        return self.repo.search(**filters)

    def create(self, payload: SQLModel):
        obj = self.repo.model(**_aware_values(payload.model_dump(exclude=self.link_fields)))
        self._apply_links(obj, payload.model_dump(include=self.link_fields))
        self._validate(obj)
        self.repo.save(obj)
        logger.info("created %s %s", self.label, obj.id)
        return obj

    def update(self, record_id: uuid.UUID, patch: SQLModel):
        obj = self.get(record_id)
        changes = _aware_values(patch.model_dump(exclude_unset=True))
        self._reject_nulls(changes)
        links = {k: changes.pop(k) for k in list(changes) if k in self.link_fields}
        for key, value in changes.items():
            setattr(obj, key, value)
        self._apply_links(obj, links)
        self._validate(obj)
        obj.date_modified = utcnow()
        self.repo.save(obj)
        logger.info("updated %s %s fields=%s", self.label, obj.id, sorted(changes) + sorted(links))
        return obj

    def delete(self, record_id: uuid.UUID) -> None:
        obj = self.get(record_id)
        self.repo.delete(obj)
        logger.info("deleted %s %s", self.label, record_id)

    def _require(self, model, record_id: Optional[uuid.UUID], label: str):
        """Load a referenced row; a dangling reference is a bad request."""
        if record_id is None:
            return None
        obj = self.session.get(model, record_id)
        if obj is None:
            raise ValueError(f"{label} not found: {record_id}")
        return obj

    def _load_all(self, model, record_ids: List[uuid.UUID], label: str) -> list:
        found = list(self.session.exec(select(model).where(model.id.in_(record_ids))).all()) if record_ids else []
        missing = set(record_ids) - {r.id for r in found}
        if missing:
            raise ValueError(f"{label} not found: {', '.join(sorted(str(m) for m in missing))}")
        return found

    def _reject_nulls(self, changes: Dict[str, Any]) -> None:
        """A PATCH may not clear a NOT NULL column."""
        columns = self.repo.model.__table__.columns
        cleared = sorted(
            key for key, value in changes.items()
            if value is None and key in columns and not columns[key].nullable
        )
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")

    def _apply_links(self, obj, links: Dict[str, Any]) -> None:
        pass

    def _validate(self, obj) -> None:
        pass


# catalogue


class ProgramService(RecordService):
    repository_cls = repositories.ProgramRepository
    label = "program"
    link_fields = {"course_ids"}

    def _apply_links(self, obj, links):
        if links.get("course_ids") is not None:
            obj.courses = self._load_all(models.Course, links["course_ids"], "course")

    def _validate(self, obj):
        _check_range(obj.start_date, obj.end_date, "start_date")
        _check_range(obj.application_start_date, obj.application_deadline, "application_start_date")

    def to_out(self, obj: models.Program) -> schemas.ProgramOut:
        return schemas.ProgramOut.model_validate(obj, update={"course_ids": [c.id for c in obj.courses]})


class EducationalOccupationalProgramService(RecordService):
    repository_cls = repositories.EducationalOccupationalProgramRepository
    label = "educational occupational program"

    def _validate(self, obj):
        _check_range(obj.start_date, obj.end_date, "start_date")
        _check_range(obj.application_start_date, obj.application_deadline, "application_start_date")


class CourseService(RecordService):
    repository_cls = repositories.CourseRepository
    label = "course"

    def to_out(self, obj: models.Course) -> schemas.CourseOut:
        return schemas.CourseOut.model_validate(obj, update={"program_ids": [p.id for p in obj.programs]})


class ActivityService(RecordService):
    repository_cls = repositories.ActivityRepository
    label = "activity"

    def _validate(self, obj):
        self._require(models.Course, obj.course_id, "course")


class TestService(RecordService):
    repository_cls = repositories.TestRepository
    label = "test"

    def _validate(self, obj):
        self._require(models.Activity, obj.activity_id, "activity")

    def to_out(self, obj: models.Test) -> schemas.TestOut:
        return schemas.TestOut.model_validate(obj, update={"stage_count": len(obj.stages)})


class OrderedItemService(RecordService):
    """Shared create/update/delete for items living in an ordered container.

    `container_model` is the owning table and `container_field` the foreign
    key column on the item that points at it.
    """
    container_model = None
    container_field = ""
    container_label = ""

    def container_of(self, item):
        return item.ordered_container()

    def _place(self, container, item, position: Optional[int]) -> None:
        if position is not None and position > 0:
            if ordering.position_taken(container, position, exclude=item):
                raise PositionConflictError(
                    f"position {position} already used in {self.container_label} {container.id}"
                )
            item.order_number = position
        else:
            item.order_number = None
        ordering.append(container, item)
        logger.debug("placed %s %s at position %s", self.label, item.id, item.order_number)

    def create(self, payload: SQLModel):
        data = payload.model_dump()
        container_id = data.pop(self.container_field)
        container = self._require(self.container_model, container_id, self.container_label)
        position = data.pop("order_number", None)
        item = self.repo.model(**data)
        self._place(container, item, position)
        self.repo.save(item)
        logger.info("created %s %s in %s %s", self.label, item.id, self.container_label, container.id)
        return item

    def update(self, record_id: uuid.UUID, patch: SQLModel):
        item = self.get(record_id)
        changes = _aware_values(patch.model_dump(exclude_unset=True))
        self._reject_nulls(changes)
        new_container_id = changes.pop(self.container_field, None)
        position = changes.pop("order_number", None)
        for key, value in changes.items():
            setattr(item, key, value)
        current = self.container_of(item)
        if new_container_id is not None and new_container_id != current.id:
            target = self._require(self.container_model, new_container_id, self.container_label)
            # no flush while the item is detached from both containers
            with self.session.no_autoflush:
                ordering.remove(current, item)
                self._place(target, item, position)
        elif position is not None and position != item.order_number:
            if ordering.position_taken(current, position, exclude=item):
                raise PositionConflictError(
                    f"position {position} already used in {self.container_label} {current.id}"
                )
            item.order_number = position
        item.date_modified = utcnow()
        self.repo.save(item)
        logger.info("updated %s %s", self.label, item.id)
        return item

    def delete(self, record_id: uuid.UUID) -> None:
        item = self.get(record_id)
        container = self.container_of(item)
        if container is None:
            self.repo.delete(item)
        else:
            # delete-orphan on the container's collection removes the row
            ordering.remove(container, item)
            self.session.commit()
        logger.info("deleted %s %s", self.label, record_id)

    def navigation(self, item) -> Dict[str, Any]:
        """Fields describing where `item` sits in its container."""
        container = self.container_of(item)
        previous_item = ordering.previous(container, item)
        next_item = ordering.next(container, item)
        return {
            "order_number": item.order_number,
            "start": ordering.is_start(item),
            "end": ordering.is_end(item),
            "previous_id": previous_item.id if previous_item is not None else None,
            "next_id": next_item.id if next_item is not None else None,
        }

    def neighbour(self, record_id: uuid.UUID, direction: Direction):
        """Return the previous or next item, or raise `NotFoundError` at the edges."""
        item = self.get(record_id)
        step = ordering.next if direction == Direction.next else ordering.previous
        found = step(self.container_of(item), item)
        if found is None:
            raise NotFoundError(f"{self.label} {record_id} has no {Direction(direction).value} {self.label}")
        return found


class StageService(OrderedItemService):
    repository_cls = repositories.StageRepository
    label = "stage"
    container_model = models.Test
    container_field = "test_id"
    container_label = "test"

    def to_out(self, obj: models.Stage) -> schemas.StageOut:
        update = self.navigation(obj)
        update["question_count"] = len(obj.questions)
        return schemas.StageOut.model_validate(obj, update=update)


class QuestionService(OrderedItemService):
    repository_cls = repositories.QuestionRepository
    label = "question"
    container_model = models.Stage
    container_field = "stage_id"
    container_label = "stage"

    def to_out(self, obj: models.Question) -> schemas.QuestionOut:
        return schemas.QuestionOut.model_validate(obj, update=self.navigation(obj))


def container_edge(container, which: Edge):
    """Return the first or last child of a test/stage, or raise `NotFoundError`."""
    found = ordering.first(container) if which == Edge.first else ordering.last(container)
    if found is None:
        raise NotFoundError(f"{type(container).__name__.lower()} {container.id} is empty")
    return found


# enrollment


class GroupService(RecordService):
    repository_cls = repositories.GroupRepository
    label = "group"

    def _validate(self, obj):
        self._require(models.Course, obj.course_id, "course")
        _check_range(obj.start_date, obj.end_date, "start_date")
        if (
            obj.min_participations is not None
            and obj.max_participations is not None
            and obj.min_participations > obj.max_participations
        ):
            raise ValueError("min_participations must not exceed max_participations")
        if obj.max_participations is not None and obj.id is not None:
            members = self.repo.count_members(obj.id)
            if members > obj.max_participations:
                raise ValueError(f"group already has {members} participants")

    def to_out(self, obj: models.Group) -> schemas.GroupOut:
        return schemas.GroupOut.model_validate(obj, update={"participant_count": len(obj.participants)})


class ParticipantService(RecordService):
    repository_cls = repositories.ParticipantRepository
    label = "participant"

    def _validate(self, obj):
        self._require(models.Program, obj.program_id, "program")
        self._require(models.Course, obj.course_id, "course")
        group = self._require(models.Group, obj.participant_group_id, "group")
        if group is not None and group.max_participations is not None:
            members = repositories.GroupRepository(self.session).count_members(group.id, exclude=obj.id)
            if members >= group.max_participations:
                raise ValueError(f"group {group.id} is full ({group.max_participations} participants)")
        if obj.status == models.ParticipantStatus.accepted and obj.date_of_acceptance is None:
            obj.date_of_acceptance = utcnow()


class EducationEventService(RecordService):
    repository_cls = repositories.EducationEventRepository
    label = "education event"
    link_fields = {"participant_ids"}

    def _apply_links(self, obj, links):
        if links.get("participant_ids") is not None:
            obj.participants = self._load_all(models.Participant, links["participant_ids"], "participant")

    def _validate(self, obj):
        self._require(models.Course, obj.course_id, "course")
        _check_range(obj.start_date, obj.end_date, "start_date")

    def to_out(self, obj: models.EducationEvent) -> schemas.EducationEventOut:
        return schemas.EducationEventOut.model_validate(
            obj, update={"participant_ids": [p.id for p in obj.participants]}
        )


class ResultService(RecordService):
    repository_cls = repositories.ResultRepository
    label = "result"

    def _validate(self, obj):
        self._require(models.Participant, obj.participant_id, "participant")
        self._require(models.Activity, obj.activity_id, "activity")


class ReviewService(RecordService):
    repository_cls = repositories.ReviewRepository
    label = "review"

    def _validate(self, obj):
        self._require(models.Result, obj.result_id, "result")
