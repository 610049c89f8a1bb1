"""Catalogue endpoints: programs, courses and activities.

Endpoints implemented:
- /programs, /educational_occupational_programs, /courses, /activities
  (GET list, POST, GET/PATCH/DELETE by id)
- GET /courses/{id}/activities
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from . import page_params

router = APIRouter()


# programs


@router.get("/programs", response_model=List[schemas.ProgramOut])
def list_programs(provider: Optional[str] = None, page: dict = Depends(page_params), db: Session = Depends(get_session)):
    """List programs, optionally filtered by provider (case-insensitive)."""
    svc = services.ProgramService(db)
    return [svc.to_out(p) for p in svc.search(provider=provider, **page)]


@router.post("/programs", response_model=schemas.ProgramOut, status_code=201)
def create_program(payload: schemas.ProgramIn, db: Session = Depends(get_session)):
    """Create a program; `course_ids` links existing courses."""
    svc = services.ProgramService(db)
    return svc.to_out(svc.create(payload))


@router.get("/programs/{program_id}", response_model=schemas.ProgramOut)
def get_program(program_id: uuid.UUID, db: Session = Depends(get_session)):
    svc = services.ProgramService(db)
    return svc.to_out(svc.get(program_id))


@router.patch("/programs/{program_id}", response_model=schemas.ProgramOut)
def update_program(program_id: uuid.UUID, patch: schemas.ProgramUpdate, db: Session = Depends(get_session)):
    """Update a program; sending `course_ids` replaces the linked courses."""
    svc = services.ProgramService(db)
    return svc.to_out(svc.update(program_id, patch))


@router.delete("/programs/{program_id}", status_code=204)
def delete_program(program_id: uuid.UUID, db: Session = Depends(get_session)):
    """Delete a program together with its participants."""
    services.ProgramService(db).delete(program_id)
    return Response(status_code=204)


@router.get("/educational_occupational_programs", response_model=List[schemas.EducationalOccupationalProgramOut])
def list_occupational_programs(provider: Optional[str] = None, page: dict = Depends(page_params), db: Session = Depends(get_session)):
    return services.EducationalOccupationalProgramService(db).search(provider=provider, **page)


@router.post("/educational_occupational_programs", response_model=schemas.EducationalOccupationalProgramOut, status_code=201)
def create_occupational_program(payload: schemas.EducationalOccupationalProgramIn, db: Session = Depends(get_session)):
    return services.EducationalOccupationalProgramService(db).create(payload)


@router.get("/educational_occupational_programs/{program_id}", response_model=schemas.EducationalOccupationalProgramOut)
def get_occupational_program(program_id: uuid.UUID, db: Session = Depends(get_session)):
    return services.EducationalOccupationalProgramService(db).get(program_id)


@router.patch("/educational_occupational_programs/{program_id}", response_model=schemas.EducationalOccupationalProgramOut)
def update_occupational_program(
    program_id: uuid.UUID,
    patch: schemas.EducationalOccupationalProgramUpdate,
    db: Session = Depends(get_session),
):
    return services.EducationalOccupationalProgramService(db).update(program_id, patch)


@router.delete("/educational_occupational_programs/{program_id}", status_code=204)
def delete_occupational_program(program_id: uuid.UUID, db: Session = Depends(get_session)):
    services.EducationalOccupationalProgramService(db).delete(program_id)
    return Response(status_code=204)


# courses


@router.get("/courses", response_model=List[schemas.CourseOut])
def list_courses(
    additional_type: Optional[str] = None,
    organization: Optional[str] = None,
    page: dict = Depends(page_params),
    db: Session = Depends(get_session),
):
    """List courses, filtered by type (e.g. Elearning) and organization."""
    svc = services.CourseService(db)
    return [svc.to_out(c) for c in svc.search(additional_type=additional_type, organization=organization, **page)]


@router.post("/courses", response_model=schemas.CourseOut, status_code=201)
def create_course(payload: schemas.CourseIn, db: Session = Depends(get_session)):
    svc = services.CourseService(db)
    return svc.to_out(svc.create(payload))


@router.get("/courses/{course_id}", response_model=schemas.CourseOut)
def get_course(course_id: uuid.UUID, db: Session = Depends(get_session)):
    svc = services.CourseService(db)
    return svc.to_out(svc.get(course_id))


@router.patch("/courses/{course_id}", response_model=schemas.CourseOut)
def update_course(course_id: uuid.UUID, patch: schemas.CourseUpdate, db: Session = Depends(get_session)):
    svc = services.CourseService(db)
    return svc.to_out(svc.update(course_id, patch))


@router.delete("/courses/{course_id}", status_code=204)
def delete_course(course_id: uuid.UUID, db: Session = Depends(get_session)):
    """Delete a course with its activities (and their tests) and events."""
    services.CourseService(db).delete(course_id)
    return Response(status_code=204)


@router.get("/courses/{course_id}/activities", response_model=List[schemas.ActivityOut])
def list_course_activities(course_id: uuid.UUID, db: Session = Depends(get_session)):
    return services.CourseService(db).get(course_id).activities


# activities


@router.get("/activities", response_model=List[schemas.ActivityOut])
def list_activities(course_id: Optional[uuid.UUID] = None, page: dict = Depends(page_params), db: Session = Depends(get_session)):
    return services.ActivityService(db).search(course_id=course_id, **page)


@router.post("/activities", response_model=schemas.ActivityOut, status_code=201)
def create_activity(payload: schemas.ActivityIn, db: Session = Depends(get_session)):
    return services.ActivityService(db).create(payload)


@router.get("/activities/{activity_id}", response_model=schemas.ActivityOut)
def get_activity(activity_id: uuid.UUID, db: Session = Depends(get_session)):
    return services.ActivityService(db).get(activity_id)


@router.patch("/activities/{activity_id}", response_model=schemas.ActivityOut)
def update_activity(activity_id: uuid.UUID, patch: schemas.ActivityUpdate, db: Session = Depends(get_session)):
    return services.ActivityService(db).update(activity_id, patch)


@router.delete("/activities/{activity_id}", status_code=204)
def delete_activity(activity_id: uuid.UUID, db: Session = Depends(get_session)):
    services.ActivityService(db).delete(activity_id)
    return Response(status_code=204)
