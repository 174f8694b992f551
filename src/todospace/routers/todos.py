from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..deps import get_current_user_id, get_storage
from ..errors import NotFound, ValidationError
from ..models import TaskEntity
from ..repositories import Storage
from ..schemas import ErrorOut, TaskCreate, TaskOut, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
    responses={401: {"model": ErrorOut, "description": "Missing, invalid or expired token"}},
)


def _out(task: TaskEntity) -> TaskOut:
    return TaskOut(id=task["id"], text=task["text"], completed=task["completed"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Todos",
    description="List the caller's tasks, most recently created first.",
)
def list_todos(
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> List[TaskOut]:
    return [_out(t) for t in storage.tasks.list(user_id)]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new task for the caller and return it.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"model": ErrorOut, "description": "Text missing or blank"},
    },
)
def create_todo(
    payload: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> TaskOut:
    """
    Create a new task. Blank text is rejected and nothing is stored.
    """
    if not payload.text:
        raise ValidationError("Text required")
    created = storage.tasks.create(user_id, payload.text)
    logger.debug("Task created id=%s owner=%s", created["id"], user_id)
    return _out(created)


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}",
    response_model=TaskOut,
    summary="Update Todo",
    description="Partially update the text and/or completion flag of one of the caller's tasks.",
    responses={
        200: {"description": "Todo updated"},
        404: {"model": ErrorOut, "description": "Todo not found"},
    },
)
def patch_todo(
    todo_id: str,
    payload: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> TaskOut:
    """
    Partial update. Tasks owned by other users are reported as not found.
    """
    updated = storage.tasks.update(user_id, todo_id, text=payload.text, completed=payload.completed)
    if updated is None:
        raise NotFound()
    return _out(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=TaskOut,
    summary="Delete Todo",
    description="Delete one of the caller's tasks and return it.",
    responses={
        200: {"description": "Todo deleted"},
        404: {"model": ErrorOut, "description": "Todo not found"},
    },
)
def delete_todo(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> TaskOut:
    removed = storage.tasks.delete(user_id, todo_id)
    if removed is None:
        raise NotFound()
    logger.debug("Task deleted id=%s owner=%s", todo_id, user_id)
    return _out(removed)
