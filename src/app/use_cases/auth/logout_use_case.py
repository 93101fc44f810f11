import logging

from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Result, Return
from .dtos import SessionContext

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """Deletes the current session. Other sessions of the user stay valid."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: SessionContext) -> Result[None]:
        async with self.uow:
            await SessionService(self.uow.sessions).invalidate_session(context.session_id)
            await self.uow.commit()

        logger.info(f"User {context.user_id} logged out")
        return Return.ok(None)
