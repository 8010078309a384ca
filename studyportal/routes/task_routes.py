from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studyportal.auth.dependencies import CurrentUser, require_admin, require_any_role, require_roles
from studyportal.database import get_db
from studyportal.models.user import ROLE_ADMIN
from studyportal.schemas.tasks import TaskCreateRequest, TaskResponse, TaskUpdateRequest
from studyportal.services.tasks import ASSIGNMENTS, HOMEWORK, TaskKind, TaskService


def build_task_router(kind: TaskKind) -> APIRouter:
    """Build the CRUD router for one task kind (homework or assignments)."""
    router = APIRouter(tags=[kind.collection_key])
    require_update_rights = require_roles(
        ROLE_ADMIN,
        detail=f'Only administrators can update {kind.plural_label}',
    )

    def get_service(db: Session = Depends(get_db)) -> TaskService:
        return TaskService(kind, db)

    @router.get('')
    def list_tasks(
        current_user: CurrentUser = Depends(require_any_role),
        service: TaskService = Depends(get_service),
    ):
        tasks = service.list(current_user)
        return {kind.collection_key: [TaskResponse.from_task(task) for task in tasks]}

    @router.get('/{task_id}')
    def get_task(
        task_id: int,
        current_user: CurrentUser = Depends(require_any_role),
        service: TaskService = Depends(get_service),
    ):
        task = service.get(current_user, task_id)
        return {kind.item_key: TaskResponse.from_task(task)}

    @router.post('', status_code=status.HTTP_201_CREATED)
    def create_task(
        data: TaskCreateRequest,
        current_user: CurrentUser = Depends(require_admin),
        service: TaskService = Depends(get_service),
    ):
        task = service.create(current_user, data.model_dump())
        return {
            'message': f'{kind.label} created successfully',
            kind.item_key: TaskResponse.from_task(task),
        }

    @router.put('/{task_id}')
    def update_task(
        task_id: int,
        data: TaskUpdateRequest,
        current_user: CurrentUser = Depends(require_update_rights),
        service: TaskService = Depends(get_service),
    ):
        task = service.update(current_user, task_id, data.changes())
        return {
            'message': f'{kind.label} updated successfully',
            kind.item_key: TaskResponse.from_task(task),
        }

    @router.delete('/{task_id}')
    def delete_task(
        task_id: int,
        current_user: CurrentUser = Depends(require_admin),
        service: TaskService = Depends(get_service),
    ):
        service.delete(current_user, task_id)
        return {'message': f'{kind.label} deleted successfully'}

    return router


homework_router = build_task_router(HOMEWORK)
assignments_router = build_task_router(ASSIGNMENTS)
