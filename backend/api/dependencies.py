"""
Shared FastAPI dependencies for the narrative graph routers
"""
from fastapi import Depends, Request

from services.character_service import CharacterService
from services.errors import StorageFailure
from services.graph_executor import IsolatedQueryExecutor
from services.moment_service import MomentService
from services.tenant_service import TenantService


def get_executor(request: Request) -> IsolatedQueryExecutor:
    """The pooled executor created at startup (app.state.executor)"""
    executor = getattr(request.app.state, "executor", None)
    if executor is None:
        raise StorageFailure()
    return executor


def get_moment_service(executor: IsolatedQueryExecutor = Depends(get_executor)) -> MomentService:
    return MomentService(executor)


def get_character_service(executor: IsolatedQueryExecutor = Depends(get_executor)) -> CharacterService:
    return CharacterService(executor)


def get_tenant_service(executor: IsolatedQueryExecutor = Depends(get_executor)) -> TenantService:
    return TenantService(executor)
