"""Test, stage and question endpoints.

Stages are kept in position order inside their test and questions inside
their stage. Creating a stage or question without `order_number` (or with
a value <= 0) appends it after the existing children; an explicit
position already in use is rejected with 409. Stage and question
representations carry `start`, `end`, `previous_id` and `next_id`.

Endpoints implemented:
- /tests, /stages, /questions (GET list, POST, GET/PATCH/DELETE by id)
- GET /tests/{id}/stages, /tests/{id}/stages/first, /tests/{id}/stages/last
- GET /stages/{id}/questions, /stages/{id}/questions/first, .../last
- GET /stages/{id}/next, /stages/{id}/previous
- GET /questions/{id}/next, /questions/{id}/previous
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from ..utils import ordering
from . import page_params

router = APIRouter()


# tests


@router.get("/tests", response_model=List[schemas.TestOut])
def list_tests(activity_id: Optional[uuid.UUID] = None, page: dict = Depends(page_params), db: Session = Depends(get_session)):
    svc = services.TestService(db)
    return [svc.to_out(t) for t in svc.search(activity_id=activity_id, **page)]


@router.post("/tests", response_model=schemas.TestOut, status_code=201)
def create_test(payload: schemas.TestIn, db: Session = Depends(get_session)):
    svc = services.TestService(db)
    return svc.to_out(svc.create(payload))


@router.get("/tests/{test_id}", response_model=schemas.TestOut)
def get_test(test_id: uuid.UUID, db: Session = Depends(get_session)):
    svc = services.TestService(db)
    return svc.to_out(svc.get(test_id))


@router.patch("/tests/{test_id}", response_model=schemas.TestOut)
def update_test(test_id: uuid.UUID, patch: schemas.TestUpdate, db: Session = Depends(get_session)):
    svc = services.TestService(db)
    return svc.to_out(svc.update(test_id, patch))


@router.delete("/tests/{test_id}", status_code=204)
def delete_test(test_id: uuid.UUID, db: Session = Depends(get_session)):
    """Delete a test together with its stages and their questions."""
    services.TestService(db).delete(test_id)
    return Response(status_code=204)


@router.get("/tests/{test_id}/stages", response_model=List[schemas.StageOut])
def list_test_stages(test_id: uuid.UUID, db: Session = Depends(get_session)):
    """Return every stage of the test in position order."""
    test = services.TestService(db).get(test_id)
    stages = services.StageService(db)
    return [stages.to_out(s) for s in ordering.ordered(test)]


@router.get("/tests/{test_id}/stages/{edge}", response_model=schemas.StageOut)
def get_test_stage_edge(test_id: uuid.UUID, edge: services.Edge, db: Session = Depends(get_session)):
    """Return the first or last stage; 404 when the test has no stages."""
    test = services.TestService(db).get(test_id)
    return services.StageService(db).to_out(services.container_edge(test, edge))


# stages


@router.get("/stages", response_model=List[schemas.StageOut])
def list_stages(test_id: Optional[uuid.UUID] = None, page: dict = Depends(page_params), db: Session = Depends(get_session)):
    svc = services.StageService(db)
    return [svc.to_out(s) for s in svc.search(test_id=test_id, **page)]


@router.post("/stages", response_model=schemas.StageOut, status_code=201)
def create_stage(payload: schemas.StageIn, db: Session = Depends(get_session)):
    """Append a stage to its test."""
    svc = services.StageService(db)
    return svc.to_out(svc.create(payload))


@router.get("/stages/{stage_id}", response_model=schemas.StageOut)
def get_stage(stage_id: uuid.UUID, db: Session = Depends(get_session)):
    svc = services.StageService(db)
    return svc.to_out(svc.get(stage_id))


@router.patch("/stages/{stage_id}", response_model=schemas.StageOut)
def update_stage(stage_id: uuid.UUID, patch: schemas.StageUpdate, db: Session = Depends(get_session)):
    """Update a stage; a new `test_id` moves it to the end of that test."""
    svc = services.StageService(db)
    return svc.to_out(svc.update(stage_id, patch))


@router.delete("/stages/{stage_id}", status_code=204)
def delete_stage(stage_id: uuid.UUID, db: Session = Depends(get_session)):
    """Remove a stage from its test; remaining stages keep their positions."""
    services.StageService(db).delete(stage_id)
    return Response(status_code=204)


@router.get("/stages/{stage_id}/questions", response_model=List[schemas.QuestionOut])
def list_stage_questions(stage_id: uuid.UUID, db: Session = Depends(get_session)):
    stage = services.StageService(db).get(stage_id)
    questions = services.QuestionService(db)
    return [questions.to_out(q) for q in ordering.ordered(stage)]


@router.get("/stages/{stage_id}/questions/{edge}", response_model=schemas.QuestionOut)
def get_stage_question_edge(stage_id: uuid.UUID, edge: services.Edge, db: Session = Depends(get_session)):
    stage = services.StageService(db).get(stage_id)
    return services.QuestionService(db).to_out(services.container_edge(stage, edge))


@router.get("/stages/{stage_id}/{direction}", response_model=schemas.StageOut)
def get_neighbour_stage(stage_id: uuid.UUID, direction: services.Direction, db: Session = Depends(get_session)):
    """Return the next or previous stage of the same test."""
    svc = services.StageService(db)
    return svc.to_out(svc.neighbour(stage_id, direction))


# questions


@router.get("/questions", response_model=List[schemas.QuestionOut])
def list_questions(stage_id: Optional[uuid.UUID] = None, page: dict = Depends(page_params), db: Session = Depends(get_session)):
    svc = services.QuestionService(db)
    return [svc.to_out(q) for q in svc.search(stage_id=stage_id, **page)]


@router.post("/questions", response_model=schemas.QuestionOut, status_code=201)
def create_question(payload: schemas.QuestionIn, db: Session = Depends(get_session)):
    """Append a question to its stage."""
    svc = services.QuestionService(db)
    return svc.to_out(svc.create(payload))


@router.get("/questions/{question_id}", response_model=schemas.QuestionOut)
def get_question(question_id: uuid.UUID, db: Session = Depends(get_session)):
    svc = services.QuestionService(db)
    return svc.to_out(svc.get(question_id))


@router.patch("/questions/{question_id}", response_model=schemas.QuestionOut)
def update_question(question_id: uuid.UUID, patch: schemas.QuestionUpdate, db: Session = Depends(get_session)):
    svc = services.QuestionService(db)
    return svc.to_out(svc.update(question_id, patch))


@router.delete("/questions/{question_id}", status_code=204)
def delete_question(question_id: uuid.UUID, db: Session = Depends(get_session)):
    services.QuestionService(db).delete(question_id)
    return Response(status_code=204)


@router.get("/questions/{question_id}/{direction}", response_model=schemas.QuestionOut)
def get_neighbour_question(question_id: uuid.UUID, direction: services.Direction, db: Session = Depends(get_session)):
    svc = services.QuestionService(db)
    return svc.to_out(svc.neighbour(question_id, direction))
