"""
Event creation pipeline and listing.

CREATION PIPELINE
=================

  1. Parse the multipart form                  -> MalformedFormError
  2. Require an `image` file part              -> MissingImageError
  3. Decode `tags` and `agenda` JSON arrays    -> MalformedTagsOrAgendaError
  4. Read the image into memory
  5. Upload it to the asset store (awaited)    -> UploadFailedError
  6. Point the event's `image` at the returned URL
  7. Persist through EventRepository.create    -> EventPersistFailedError
  8. Hand back a PipelineResult

The pipeline stops at the first failing step. The upload always happens
before the insert is attempted and never after one succeeds, so there is no
event without a stored image. The reverse is possible: if step 7 fails, the
uploaded object stays in the bucket. It is logged as `orphaned_asset` and not
deleted.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from devevent.core.config import get_settings
from devevent.core.logging import get_logger
from devevent.core.metrics import record_event_creation
from devevent.domain.errors import (
    DomainError,
    EventPersistFailedError,
    MalformedFormError,
    MalformedTagsOrAgendaError,
    MissingImageError,
    PersistError,
)
from devevent.infrastructure.asset_store import AssetStore
from devevent.models.event import Event
from devevent.repositories.events import EventRepository
from devevent.schemas.event import EventForm, StringList

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    event: Optional[Event] = None
    error: Optional[DomainError] = None

    @property
    def success(self) -> bool:
        return self.error is None


async def create_event_from_form(
    request: Any,
    repository: EventRepository,
    asset_store: AssetStore,
) -> PipelineResult:
    """Run the creation pipeline. Never raises; failures come back in the result."""
    try:
        event = await _run_pipeline(request, repository, asset_store)
    except DomainError as exc:
        logger.warning("event_creation_failed", code=exc.code.value, error=exc.message)
        record_event_creation(exc.code.value)
        return PipelineResult(error=exc)
    except Exception as exc:
        logger.exception("event_creation_crashed")
        error = PersistError(str(exc) or type(exc).__name__)
        record_event_creation(error.code.value)
        return PipelineResult(error=error)

    record_event_creation("created")
    return PipelineResult(event=event)


async def _run_pipeline(request: Any, repository: EventRepository, asset_store: AssetStore) -> Event:
    form = await _parse_form(request)
    try:
        image = form.get("image")
        if not isinstance(image, UploadFile):
            raise MissingImageError()

        text_fields = {
            key: value for key, value in form.multi_items() if not isinstance(value, UploadFile)
        }
        event_form = EventForm(
            **{k: v for k, v in text_fields.items() if k not in ("tags", "agenda")},
            tags=_parse_string_list(text_fields, "tags"),
            agenda=_parse_string_list(text_fields, "agenda"),
        )

        data = await image.read()
    finally:
        await form.close()

    image_url = await asset_store.upload(
        data,
        namespace=get_settings().ASSET_FOLDER,
        filename=image.filename,
        content_type=image.content_type,
    )

    try:
        return await repository.create(event_form.to_event_fields(image_url))
    except DomainError as exc:
        logger.warning("orphaned_asset", image=image_url, code=exc.code.value)
        raise EventPersistFailedError(exc) from exc


async def _parse_form(request: Any) -> FormData:
    try:
        return await request.form()
    except (MultiPartException, StarletteHTTPException, KeyError, ValueError) as exc:
        raise MalformedFormError() from exc


def _parse_string_list(fields: dict[str, str], name: str) -> list[str]:
    raw = fields.get(name)
    if raw is None:
        raise MalformedTagsOrAgendaError(name)
    try:
        return StringList.validate_json(raw)
    except ValidationError as exc:
        raise MalformedTagsOrAgendaError(name) from exc


async def list_events(
    repository: EventRepository,
    date: Optional[str] = None,
    mode: Optional[str] = None,
) -> list[Event]:
    if date is None:
        return await repository.list_recent(mode)
    return await repository.find_by_date_and_mode(date, mode)
