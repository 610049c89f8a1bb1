"""Enrollment endpoints: participants, groups, events, results and reviews.

Endpoints implemented:
- /participants, /groups, /education_events, /results, /reviews
  (GET list, POST, GET/PATCH/DELETE by id)
- GET /groups/{id}/participants
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from .. import models, schemas, services
from ..database import get_session
from . import page_params

router = APIRouter()


# participants


@router.get("/participants", response_model=List[schemas.ParticipantOut])
def list_participants(
    person: Optional[str] = None,
    course_id: Optional[uuid.UUID] = None,
    program_id: Optional[uuid.UUID] = None,
    status: Optional[models.ParticipantStatus] = None,
    participant_group_id: Optional[uuid.UUID] = None,
    order: Literal["asc", "desc"] = "asc",
    page: dict = Depends(page_params),
    db: Session = Depends(get_session),
):
    """List participants; `order` sorts by creation date."""
    return services.ParticipantService(db).search(
        person=person,
        course_id=course_id,
        program_id=program_id,
        status=status,
        participant_group_id=participant_group_id,
        newest_first=order == "desc",
        **page,
    )


@router.post("/participants", response_model=schemas.ParticipantOut, status_code=201)
def create_participant(payload: schemas.ParticipantIn, db: Session = Depends(get_session)):
    """Enroll a person. Accepted participants get a `date_of_acceptance`."""
    return services.ParticipantService(db).create(payload)


@router.get("/participants/{participant_id}", response_model=schemas.ParticipantOut)
def get_participant(participant_id: uuid.UUID, db: Session = Depends(get_session)):
    return services.ParticipantService(db).get(participant_id)


@router.patch("/participants/{participant_id}", response_model=schemas.ParticipantOut)
def update_participant(participant_id: uuid.UUID, patch: schemas.ParticipantUpdate, db: Session = Depends(get_session)):
    return services.ParticipantService(db).update(participant_id, patch)


@router.delete("/participants/{participant_id}", status_code=204)
def delete_participant(participant_id: uuid.UUID, db: Session = Depends(get_session)):
    services.ParticipantService(db).delete(participant_id)
    return Response(status_code=204)


# groups


@router.get("/groups", response_model=List[schemas.GroupOut])
def list_groups(
    course_id: Optional[uuid.UUID] = None,
    mentor: Optional[str] = None,
    start_after: Optional[datetime] = None,
    end_before: Optional[datetime] = None,
    page: dict = Depends(page_params),
    db: Session = Depends(get_session),
):
    """List groups by course, mentor (partial match) and date window."""
    svc = services.GroupService(db)
    found = svc.search(course_id=course_id, mentor=mentor, start_after=start_after, end_before=end_before, **page)
    return [svc.to_out(g) for g in found]


@router.post("/groups", response_model=schemas.GroupOut, status_code=201)
def create_group(payload: schemas.GroupIn, db: Session = Depends(get_session)):
    svc = services.GroupService(db)
    return svc.to_out(svc.create(payload))


@router.get("/groups/{group_id}", response_model=schemas.GroupOut)
def get_group(group_id: uuid.UUID, db: Session = Depends(get_session)):
    svc = services.GroupService(db)
    return svc.to_out(svc.get(group_id))


@router.patch("/groups/{group_id}", response_model=schemas.GroupOut)
def update_group(group_id: uuid.UUID, patch: schemas.GroupUpdate, db: Session = Depends(get_session)):
    svc = services.GroupService(db)
    return svc.to_out(svc.update(group_id, patch))


@router.delete("/groups/{group_id}", status_code=204)
def delete_group(group_id: uuid.UUID, db: Session = Depends(get_session)):
    """Delete a group; its participants stay enrolled without a group."""
    services.GroupService(db).delete(group_id)
    return Response(status_code=204)


@router.get("/groups/{group_id}/participants", response_model=List[schemas.ParticipantOut])
def list_group_participants(group_id: uuid.UUID, db: Session = Depends(get_session)):
    return services.GroupService(db).get(group_id).participants


# education events


@router.get("/education_events", response_model=List[schemas.EducationEventOut])
def list_education_events(course_id: Optional[uuid.UUID] = None, page: dict = Depends(page_params), db: Session = Depends(get_session)):
    svc = services.EducationEventService(db)
    return [svc.to_out(e) for e in svc.search(course_id=course_id, **page)]


@router.post("/education_events", response_model=schemas.EducationEventOut, status_code=201)
def create_education_event(payload: schemas.EducationEventIn, db: Session = Depends(get_session)):
    """Create an event; `participant_ids` registers attendees."""
    svc = services.EducationEventService(db)
    return svc.to_out(svc.create(payload))


@router.get("/education_events/{event_id}", response_model=schemas.EducationEventOut)
def get_education_event(event_id: uuid.UUID, db: Session = Depends(get_session)):
    svc = services.EducationEventService(db)
    return svc.to_out(svc.get(event_id))


@router.patch("/education_events/{event_id}", response_model=schemas.EducationEventOut)
def update_education_event(event_id: uuid.UUID, patch: schemas.EducationEventUpdate, db: Session = Depends(get_session)):
    svc = services.EducationEventService(db)
    return svc.to_out(svc.update(event_id, patch))


@router.delete("/education_events/{event_id}", status_code=204)
def delete_education_event(event_id: uuid.UUID, db: Session = Depends(get_session)):
    services.EducationEventService(db).delete(event_id)
    return Response(status_code=204)


# results and reviews


@router.get("/results", response_model=List[schemas.ResultOut])
def list_results(
    participant_id: Optional[uuid.UUID] = None,
    activity_id: Optional[uuid.UUID] = None,
    page: dict = Depends(page_params),
    db: Session = Depends(get_session),
):
    return services.ResultService(db).search(participant_id=participant_id, activity_id=activity_id, **page)


@router.post("/results", response_model=schemas.ResultOut, status_code=201)
def create_result(payload: schemas.ResultIn, db: Session = Depends(get_session)):
    return services.ResultService(db).create(payload)


@router.get("/results/{result_id}", response_model=schemas.ResultOut)
def get_result(result_id: uuid.UUID, db: Session = Depends(get_session)):
    return services.ResultService(db).get(result_id)


@router.patch("/results/{result_id}", response_model=schemas.ResultOut)
def update_result(result_id: uuid.UUID, patch: schemas.ResultUpdate, db: Session = Depends(get_session)):
    return services.ResultService(db).update(result_id, patch)


@router.delete("/results/{result_id}", status_code=204)
def delete_result(result_id: uuid.UUID, db: Session = Depends(get_session)):
    services.ResultService(db).delete(result_id)
    return Response(status_code=204)


@router.get("/reviews", response_model=List[schemas.ReviewOut])
def list_reviews(result_id: Optional[uuid.UUID] = None, page: dict = Depends(page_params), db: Session = Depends(get_session)):
    return services.ReviewService(db).search(result_id=result_id, **page)


@router.post("/reviews", response_model=schemas.ReviewOut, status_code=201)
def create_review(payload: schemas.ReviewIn, db: Session = Depends(get_session)):
    return services.ReviewService(db).create(payload)


@router.get("/reviews/{review_id}", response_model=schemas.ReviewOut)
def get_review(review_id: uuid.UUID, db: Session = Depends(get_session)):
    return services.ReviewService(db).get(review_id)


@router.patch("/reviews/{review_id}", response_model=schemas.ReviewOut)
def update_review(review_id: uuid.UUID, patch: schemas.ReviewUpdate, db: Session = Depends(get_session)):
    return services.ReviewService(db).update(review_id, patch)


@router.delete("/reviews/{review_id}", status_code=204)
def delete_review(review_id: uuid.UUID, db: Session = Depends(get_session)):
    services.ReviewService(db).delete(review_id)
    return Response(status_code=204)
