"""
Event repository: validation, normalization and persistence of events.

Creation runs in a fixed order:
  1. Field rules (required, trimmed, length bounds, mode, non-empty lists)
  2. Normalization (slug from title, canonical date and time)
  3. Insert, with the unique slug index as the final arbiter of collisions

Two titles that slugify identically are not detected up front; the second
insert hits the unique index and is reported as DuplicateSlugError. That keeps
concurrent creators correct without any application-level locking.
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.core.logging import get_logger
from devevent.domain.errors import DuplicateSlugError, EventValidationError, PersistError
from devevent.domain.normalization import normalize_date, normalize_event_fields
from devevent.models.event import Event
from devevent.repositories.base import is_unique_violation
from devevent.schemas.event import validate_event_fields

logger = get_logger(__name__)


class EventRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, fields: dict[str, Any]) -> Event:
        values = validate_event_fields(fields)
        values = normalize_event_fields(values)

        if not values["slug"]:
            raise EventValidationError(
                [{"field": "title", "message": "Title must contain at least one letter or digit"}]
            )

        event = Event(**values)
        self.session.add(event)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if is_unique_violation(exc):
                logger.warning("event_duplicate_slug", slug=values["slug"])
                raise DuplicateSlugError(values["slug"]) from exc
            raise PersistError("Event could not be saved") from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistError("Event could not be saved") from exc

        logger.info("event_created", event_id=event.id, slug=event.slug, date=event.date)
        return event

    async def get(self, event_id: int) -> Optional[Event]:
        result = await self.session.execute(select(Event).where(Event.id == event_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Event]:
        result = await self.session.execute(select(Event).where(Event.slug == slug))
        return result.scalar_one_or_none()

    async def list_recent(self, mode: Optional[str] = None) -> list[Event]:
        """Events newest first. Uses ix_events_created_at."""
        query = select(Event)
        if mode is not None:
            query = query.where(Event.mode == mode)
        result = await self.session.execute(
            query.order_by(Event.created_at.desc(), Event.id.desc())
        )
        return list(result.scalars().all())

    async def find_by_date_and_mode(
        self,
        date: str,
        mode: Optional[str] = None,
    ) -> list[Event]:
        """
        Events on a given day, optionally restricted to one mode.
        The date is normalized first so any accepted input format matches the
        stored canonical value. Uses the ix_events_date_mode composite index.
        """
        query = select(Event).where(Event.date == normalize_date(date))
        if mode is not None:
            query = query.where(Event.mode == mode)
        result = await self.session.execute(
            query.order_by(Event.time.asc(), Event.id.asc())
        )
        return list(result.scalars().all())
