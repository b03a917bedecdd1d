"""
Record Service Base

Every domain service is a facade over one table of the record store.
The base class owns the parts they all share:

- unpacking the store's response envelope
- skipping records that can't be turned into a model
- the failure policy: reads log and return empty, writes log and raise
- success/error notices through the ActivityLogger

Subclasses only declare their table and fields and translate between
raw ``_c`` records and domain models.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from src.activity import ActivityLogger
from src.models.records import (
    FetchParams,
    FieldSpec,
    OrderBy,
    RecordResponse,
    WhereCondition,
)
from src.services.records import (
    NotFoundError,
    RecordGateway,
    RecordOperationError,
    RecordStoreError,
)
from src.services.records.schema import ID_COLUMN


ModelT = TypeVar("ModelT", bound=BaseModel)

logger = structlog.get_logger(__name__)


class RecordService(ABC, Generic[ModelT]):
    """Base class for the per-table domain services."""

    table: str = ""
    label: str = "record"
    fields: list[FieldSpec] = []
    default_order: list[OrderBy] = []

    def __init__(
        self,
        gateway: RecordGateway,
        activity: Optional[ActivityLogger] = None,
    ):
        self._gateway = gateway
        self._activity = activity or ActivityLogger()

    # -------------------------------------------------------------------------
    # Translation
    # -------------------------------------------------------------------------

    @abstractmethod
    def _record_to_model(self, record: dict[str, Any]) -> ModelT:
        """Convert a raw store record to a domain model."""
        pass

    @abstractmethod
    def _model_to_record(self, model: ModelT) -> dict[str, Any]:
        """Convert a domain model to the writable columns of a record."""
        pass

    def _to_models(self, records: list[dict[str, Any]]) -> list[ModelT]:
        models = []
        for record in records:
            try:
                models.append(self._record_to_model(record))
            except (ValidationError, ValueError, TypeError, KeyError) as e:
                self._activity.log_record_skipped(self.table, record.get(ID_COLUMN), str(e))
        return models

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _params(
        self,
        where: Optional[list[WhereCondition]] = None,
        order_by: Optional[list[OrderBy]] = None,
    ) -> FetchParams:
        return FetchParams(
            fields=self.fields,
            where=where or [],
            order_by=self.default_order if order_by is None else order_by,
        )

    async def _fetch(
        self,
        where: Optional[list[WhereCondition]] = None,
        order_by: Optional[list[OrderBy]] = None,
    ) -> list[ModelT]:
        """Fetch and translate records. Failures are logged and yield []."""
        try:
            response = await self._gateway.fetch_records(
                self.table, self._params(where, order_by)
            )
        except RecordStoreError as e:
            self._activity.log_load_failed(self.table, self.label, str(e))
            return []

        if not response.success:
            self._activity.log_load_failed(
                self.table, self.label, response.message or "Unknown error"
            )
            return []

        return self._to_models(response.data or [])

    async def get_all(self) -> list[ModelT]:
        """All records of this table, in the service's default order."""
        return await self._fetch()

    async def get_by_id(self, record_id: int) -> Optional[ModelT]:
        """A single record, or None if it doesn't exist or can't be loaded."""
        try:
            response = await self._gateway.get_record_by_id(
                self.table, int(record_id), FetchParams(fields=self.fields)
            )
        except RecordStoreError as e:
            self._activity.log_load_failed(self.table, self.label, str(e), int(record_id))
            return None

        if not response.success or not response.data:
            logger.info(
                "record_not_found",
                table=self.table,
                record_id=record_id,
                message=response.message,
            )
            return None

        models = self._to_models([response.data])
        return models[0] if models else None

    async def _require(self, record_id: int) -> ModelT:
        model = await self.get_by_id(record_id)
        if model is None:
            raise NotFoundError(f"{self.label.capitalize()} with Id {record_id} not found")
        return model

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _unwrap_saved(
        self,
        response: RecordResponse,
        record_id: Optional[int] = None,
    ) -> ModelT:
        """The saved model from a create/update response, or raise."""
        if not response.success:
            message = response.message or f"Failed to save {self.label}"
            self._activity.log_save_failed(self.table, self.label, message, record_id)
            raise RecordOperationError(message)

        if response.failed:
            failure = response.failed[0]
            message = failure.message or f"Failed to save {self.label}"
            self._activity.log_save_failed(
                self.table,
                self.label,
                message,
                record_id,
                [e.model_dump() for e in failure.errors],
            )
            raise RecordOperationError(message, failure.errors)

        if not response.successful or not response.successful[0].data:
            message = f"No {self.label} was saved"
            self._activity.log_save_failed(self.table, self.label, message, record_id)
            raise RecordOperationError(message)

        return self._record_to_model(response.successful[0].data)

    async def create(self, model: ModelT) -> ModelT:
        """
        Create a record from a model.

        Returns:
            The stored model, with its new Id

        Raises:
            RecordOperationError: If the store rejected the record
            RecordStoreError: If the store could not be reached
        """
        record = self._model_to_record(model)
        try:
            response = await self._gateway.create_record(self.table, [record])
        except RecordStoreError as e:
            self._activity.log_save_failed(self.table, self.label, str(e))
            raise

        saved = self._unwrap_saved(response)
        self._activity.log_created(self.table, getattr(saved, "id", None), self.label)
        return saved

    async def update(self, record_id: int, model: ModelT) -> ModelT:
        """
        Overwrite a record's writable columns from a model.

        Raises:
            RecordOperationError: If the record doesn't exist or was rejected
            RecordStoreError: If the store could not be reached
        """
        record_id = int(record_id)
        record = {ID_COLUMN: record_id, **self._model_to_record(model)}
        try:
            response = await self._gateway.update_record(self.table, [record])
        except RecordStoreError as e:
            self._activity.log_save_failed(self.table, self.label, str(e), record_id)
            raise

        saved = self._unwrap_saved(response, record_id)
        self._activity.log_updated(self.table, record_id, self.label)
        return saved

    async def delete(self, record_id: int) -> bool:
        """
        Delete a record.

        Raises:
            RecordOperationError: If the store refused the delete
            RecordStoreError: If the store could not be reached
        """
        record_id = int(record_id)
        try:
            response = await self._gateway.delete_record(self.table, [record_id])
        except RecordStoreError as e:
            self._activity.log_delete_failed(self.table, self.label, record_id, str(e))
            raise

        if not response.success or response.failed:
            message = response.message or (
                response.failed[0].message if response.failed else None
            ) or f"Failed to delete {self.label}"
            self._activity.log_delete_failed(self.table, self.label, record_id, message)
            raise RecordOperationError(message)

        if not response.successful:
            return False

        self._activity.log_deleted(self.table, record_id, self.label)
        return True
