from fastapi import APIRouter

from task_tracker_app.web.routers.projects import router as projects_router
from task_tracker_app.web.routers.system import router as system_router
from task_tracker_app.web.routers.tasks import router as tasks_router


router = APIRouter()
router.include_router(system_router)
router.include_router(projects_router)
router.include_router(tasks_router)
