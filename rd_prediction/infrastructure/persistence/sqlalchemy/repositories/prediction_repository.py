"""
Prediction repository implementation using SQLAlchemy.

Implements the record store for PredictionRecord: creation in ``pending``,
the single guarded transition to a terminal status, owner-scoped reads and
deletes, offset pagination and per-user aggregates.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, case, delete, func, select, update

from rd_prediction.core.exceptions import ValidationError
from rd_prediction.core.utils.logging import get_logger
from rd_prediction.domain.entities.prediction import (
    InputData,
    PatientInfo,
    PredictionRecord,
    PredictionResult,
    RequestMetadata,
)
from rd_prediction.domain.enums import ModelType, PredictionStatus
from rd_prediction.domain.exceptions import EntityNotFoundException, InvalidStatusTransitionError
from rd_prediction.domain.repositories.prediction_repository import (
    PredictionFilters,
    PredictionRepository,
    PredictionStats,
)
from rd_prediction.infrastructure.persistence.sqlalchemy.models.prediction import PredictionModel
from rd_prediction.infrastructure.persistence.sqlalchemy.repositories.base_repository import (
    BaseSQLAlchemyRepository,
)
from rd_prediction.infrastructure.persistence.sqlalchemy.repositories.user_repository import as_utc

logger = get_logger(__name__)

RECENT_ACTIVITY_SIZE = 5


class SQLAlchemyPredictionRepository(
    BaseSQLAlchemyRepository[PredictionRecord, PredictionModel], PredictionRepository
):
    """SQLAlchemy implementation of the PredictionRepository interface."""

    def __init__(self, session_factory):
        super().__init__(session_factory, PredictionModel)

    async def create(
        self,
        user_id: UUID,
        input_meta: InputData,
        *,
        model_type: ModelType | None = None,
        auto_detected: bool = False,
        patient_info: PatientInfo | None = None,
        metadata: RequestMetadata | None = None,
        model_version: str = "1.0",
    ) -> PredictionRecord:
        """
        Insert a new pending record.

        Raises:
            ValidationError: If ``user_id`` or ``input_meta`` is missing
            RepositoryError: If database operation fails
        """
        if user_id is None:
            raise ValidationError("User is required", detail={"field": "user_id"})
        if input_meta is None:
            raise ValidationError("Input data is required", detail={"field": "input_data"})

        record = PredictionRecord(
            user_id=user_id,
            input_data=input_meta,
            model_type=model_type,
            auto_detected=auto_detected,
            patient_info=patient_info if patient_info and not patient_info.is_empty() else None,
            metadata=metadata or RequestMetadata(),
            model_version=model_version,
        )
        async with self._transaction("create prediction") as session:
            session.add(self._to_model(record))

        logger.info(f"Created pending prediction {record.id} for user {user_id}")
        return record

    async def mark_completed(
        self,
        record_id: UUID,
        result: PredictionResult,
        processing_time_ms: int,
        *,
        model_type: ModelType | None = None,
        model_version: str | None = None,
    ) -> PredictionRecord:
        async with self._transaction("mark prediction completed") as session:
            record = await self._load_for_transition(session, record_id)
            record.mark_completed(result, processing_time_ms, model_type, model_version)
            await self._apply_transition(session, record)

        logger.info(f"Prediction {record_id} completed in {record.processing_time} ms")
        return record

    async def mark_failed(self, record_id: UUID, message: str) -> PredictionRecord:
        async with self._transaction("mark prediction failed") as session:
            record = await self._load_for_transition(session, record_id)
            record.mark_failed(message)
            await self._apply_transition(session, record)

        logger.warning(f"Prediction {record_id} failed: {message}")
        return record

    async def _load_for_transition(self, session, record_id: UUID) -> PredictionRecord:
        model = await session.get(PredictionModel, record_id)
        if model is None:
            raise EntityNotFoundException(f"Prediction {record_id} not found")
        return self._to_entity(model)

    async def _apply_transition(self, session, record: PredictionRecord) -> None:
        # Conditional on the row still being pending so the transition happens once
        values = {
            getattr(PredictionModel, key): value
            for key, value in self._to_model(record).dict().items()
            if key not in ("id", "user_id", "created_at")
        }
        result = await session.execute(
            update(PredictionModel)
            .where(
                PredictionModel.id == record.id,
                PredictionModel.status == PredictionStatus.PENDING.value,
            )
            .values(values)
        )
        if result.rowcount == 0:
            raise InvalidStatusTransitionError(record.id, "terminal", record.status.value)

    async def get_by_id(self, record_id: UUID) -> PredictionRecord | None:
        return await super().get_by_id(record_id)

    async def get_for_user(self, record_id: UUID, user_id: UUID) -> PredictionRecord:
        record = await self.get_by_id(record_id)
        if record is None or not record.owned_by(user_id):
            raise EntityNotFoundException("Prediction not found")
        return record

    async def list_for_user(
        self,
        user_id: UUID,
        page: int = 1,
        page_size: int = 10,
        filters: PredictionFilters | None = None,
    ) -> tuple[list[PredictionRecord], int]:
        page = max(page, 1)
        page_size = max(page_size, 1)
        conditions = self._conditions(user_id, filters)

        async with self._transaction("list predictions") as session:
            total = (
                await session.execute(
                    select(func.count()).select_from(PredictionModel).where(and_(*conditions))
                )
            ).scalar() or 0

            result = await session.execute(
                select(PredictionModel)
                .where(and_(*conditions))
                .order_by(PredictionModel.created_at.desc(), PredictionModel.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            records = [self._to_entity(model) for model in result.scalars().all()]

        return records, total

    async def stats(self, user_id: UUID, since: datetime | None = None) -> PredictionStats:
        conditions = [PredictionModel.user_id == user_id]
        if since is not None:
            conditions.append(PredictionModel.created_at >= as_utc(since))
        where = and_(*conditions)
        completed = PredictionModel.status == PredictionStatus.COMPLETED.value

        async with self._transaction("aggregate prediction stats") as session:
            row = (
                await session.execute(
                    select(
                        func.count(PredictionModel.id),
                        func.avg(case((completed, PredictionModel.confidence))),
                        func.sum(case((completed, 1), else_=0)),
                        func.sum(case((PredictionModel.status == PredictionStatus.FAILED.value, 1), else_=0)),
                        func.sum(case((and_(completed, PredictionModel.is_positive.is_(True)), 1), else_=0)),
                        func.avg(case((completed, PredictionModel.processing_time))),
                    ).where(where)
                )
            ).one()

            distribution_rows = await session.execute(
                select(PredictionModel.model_type, func.count(PredictionModel.id))
                .where(where, PredictionModel.model_type.is_not(None))
                .group_by(PredictionModel.model_type)
            )

            recent = await session.execute(
                select(PredictionModel)
                .where(where)
                .order_by(PredictionModel.created_at.desc(), PredictionModel.id.desc())
                .limit(RECENT_ACTIVITY_SIZE)
            )
            recent_records = [self._to_entity(model) for model in recent.scalars().all()]

        count, avg_confidence, success_count, failed_count, positive_results, avg_processing = row
        return PredictionStats(
            count=count or 0,
            avg_confidence=round(float(avg_confidence or 0.0), 4),
            success_count=int(success_count or 0),
            failed_count=int(failed_count or 0),
            model_distribution={model_type: total for model_type, total in distribution_rows.all()},
            positive_results=int(positive_results or 0),
            avg_processing_time=round(float(avg_processing or 0.0), 2),
            recent_activity=recent_records,
        )

    async def delete(self, record_id: UUID, user_id: UUID) -> None:
        async with self._transaction("delete prediction") as session:
            result = await session.execute(
                delete(PredictionModel).where(
                    PredictionModel.id == record_id,
                    PredictionModel.user_id == user_id,
                )
            )
            if result.rowcount == 0:
                raise EntityNotFoundException("Prediction not found")

        logger.info(f"Deleted prediction {record_id}")

    @staticmethod
    def _conditions(user_id: UUID, filters: PredictionFilters | None) -> list:
        conditions = [PredictionModel.user_id == user_id]
        if filters is None:
            return conditions
        if filters.patient_id:
            conditions.append(PredictionModel.patient_id == filters.patient_id)
        if filters.model_type is not None:
            conditions.append(PredictionModel.model_type == filters.model_type.value)
        if filters.status is not None:
            conditions.append(PredictionModel.status == filters.status.value)
        if filters.date_from is not None:
            conditions.append(PredictionModel.created_at >= as_utc(filters.date_from))
        if filters.date_to is not None:
            conditions.append(PredictionModel.created_at <= as_utc(filters.date_to))
        return conditions

    def _to_model(self, entity: PredictionRecord) -> PredictionModel:
        result = entity.result
        return PredictionModel(
            id=entity.id,
            user_id=entity.user_id,
            input_data=entity.input_data.model_dump(mode="json"),
            model_type=entity.model_type.value if entity.model_type else None,
            auto_detected=entity.auto_detected,
            patient_id=entity.patient_info.patient_id if entity.patient_info else None,
            patient_info=entity.patient_info.model_dump(mode="json") if entity.patient_info else None,
            result=result.model_dump(mode="json") if result else None,
            confidence=result.confidence if result else None,
            is_positive=result.is_positive if result else None,
            model_version=entity.model_version,
            processing_time=entity.processing_time,
            status=entity.status.value,
            error_message=entity.error_message,
            request_metadata=entity.metadata.model_dump(mode="json"),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _to_entity(self, model: PredictionModel) -> PredictionRecord:
        return PredictionRecord(
            id=model.id,
            user_id=model.user_id,
            input_data=InputData.model_validate(model.input_data or {}),
            model_type=ModelType(model.model_type) if model.model_type else None,
            auto_detected=bool(model.auto_detected),
            patient_info=PatientInfo.model_validate(model.patient_info) if model.patient_info else None,
            result=PredictionResult.model_validate(model.result) if model.result else None,
            model_version=model.model_version,
            processing_time=model.processing_time,
            status=PredictionStatus(model.status),
            error_message=model.error_message,
            metadata=RequestMetadata.model_validate(model.request_metadata or {}),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
