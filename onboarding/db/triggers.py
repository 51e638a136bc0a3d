"""
"On create" trigger for the member collection.

Watches every session made by a session factory. Members inserted in a
flush are remembered on the session and handed to the handler once the
transaction commits; a rollback forgets them. The handler runs on the
executor when one is given, inline otherwise. Failures are logged and
never reach the session that committed.
"""
import logging
from concurrent.futures import Executor, Future
from typing import Callable, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session, sessionmaker

from onboarding.models.member import Member

logger = logging.getLogger(__name__)

_PENDING_KEY = "created_member_ids"


class MemberCreatedTrigger:
    def __init__(
        self,
        session_factory: sessionmaker,
        handler: Callable[[str], object],
        executor: Optional[Executor] = None,
    ):
        self.session_factory = session_factory
        self.handler = handler
        self.executor = executor
        self.installed = False

    def install(self):
        event.listen(self.session_factory, "after_flush", self._after_flush)
        event.listen(self.session_factory, "after_commit", self._after_commit)
        event.listen(self.session_factory, "after_soft_rollback", self._after_rollback)
        self.installed = True
        logger.info("Member create trigger installed")

    def remove(self):
        if not self.installed:
            return
        event.remove(self.session_factory, "after_flush", self._after_flush)
        event.remove(self.session_factory, "after_commit", self._after_commit)
        event.remove(self.session_factory, "after_soft_rollback", self._after_rollback)
        self.installed = False

    def _after_flush(self, session: Session, flush_context):
        # session.new still holds the pre-flush state here
        created = [obj.id for obj in session.new if isinstance(obj, Member)]
        if created:
            session.info.setdefault(_PENDING_KEY, []).extend(created)

    def _after_commit(self, session: Session):
        for member_id in session.info.pop(_PENDING_KEY, []):
            self.fire(member_id)

    def _after_rollback(self, session: Session, previous_transaction):
        session.info.pop(_PENDING_KEY, None)

    def fire(self, member_id: str):
        logger.info(f"Got new member {member_id}")
        if self.executor is None:
            try:
                self.handler(member_id)
            except Exception:
                logger.exception(f"❌ Registration failed for member {member_id}")
            return

        future = self.executor.submit(self.handler, member_id)
        future.add_done_callback(lambda f: self._log_outcome(member_id, f))

    @staticmethod
    def _log_outcome(member_id: str, future: Future):
        error = future.exception()
        if error is not None:
            logger.error(
                f"❌ Registration failed for member {member_id}: {error}",
                exc_info=(type(error), error, error.__traceback__),
            )
