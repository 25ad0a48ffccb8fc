"""Pet Life Stage Background Worker

Nightly job that keeps each pet's life stage in line with its age.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.pet_repository import SqlAlchemyPetRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.pets import (
    UpdatePetLifeStages,
    UpdatePetLifeStagesCommandDTO,
    LifeStageUpdateResultDTO,
)

logger = logging.getLogger(__name__)


class LifeStageUpdaterWorker:
    """
    Background worker for pet life stage reconciliation

    Features:
    - Chunked scan of active pets (LIFE_STAGE_BATCH_SIZE per commit)
    - Idempotent: a second run on the same day updates nothing
    - Can run once or continuously
    - Configurable interval (default: daily)

    Usage:
        # Run once
        worker = LifeStageUpdaterWorker()
        result = await worker.run_once()

        # Run continuously
        worker = LifeStageUpdaterWorker()
        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        batch_size: Optional[int] = None,
        session_factory=None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            batch_size: Pets per chunk (defaults to ApplicationConfig.LIFE_STAGE_BATCH_SIZE)
            session_factory: Existing async session factory (tests); an engine
                             is created from db_uri when omitted
        """
        self.batch_size = batch_size or ApplicationConfig.LIFE_STAGE_BATCH_SIZE
        self.engine = None

        if session_factory is not None:
            self.async_session_factory = session_factory
        else:
            self.engine = create_async_engine(
                db_uri or ApplicationConfig.DB_URI, echo=False, future=True
            )
            self.async_session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )

        logger.info("LifeStageUpdaterWorker initialized")

    async def run_once(self) -> LifeStageUpdateResultDTO:
        """
        Run the life stage update once

        Returns:
            LifeStageUpdateResultDTO with update counts
        """
        if not ApplicationConfig.LIFE_STAGE_JOB_ENABLED:
            logger.info("Life stage job is disabled, skipping")
            now = datetime.utcnow()
            return LifeStageUpdateResultDTO(
                updated_count=0,
                scanned_count=0,
                run_date=now.date(),
                started_at=now,
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = UpdatePetLifeStages(
                uow=SqlAlchemyUnitOfWork(session),
                pet_repo=SqlAlchemyPetRepository(session),
            )

            result = await use_case.execute(
                UpdatePetLifeStagesCommandDTO(batch_size=self.batch_size)
            )

            if result.is_err():
                logger.error(f"Life stage update failed: {result.error.reason}")
                raise RuntimeError(f"Life stage update failed: {result.error.message}")

            return result.value

    async def run_forever(self, interval_seconds: int = 86400):
        """
        Run the life stage update continuously at the given interval

        Args:
            interval_seconds: Seconds between runs (default: 24 hours)
        """
        logger.info(f"Starting continuous life stage updates with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Life stage cycle complete. Updated {result.updated_count} "
                    f"of {result.scanned_count} pets in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Life stage cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("LifeStageUpdaterWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.life_stage_updater

        # Run continuously (default interval: LIFE_STAGE_INTERVAL_SECONDS)
        python -m src.worker.life_stage_updater --continuous

        # Run continuously with a custom interval (in seconds)
        python -m src.worker.life_stage_updater --continuous --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Pet Life Stage Worker")
    parser.add_argument(
        "--continuous", action="store_true", help="Keep running at --interval"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.LIFE_STAGE_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 86400 = 24 hours)"
    )
    args = parser.parse_args()

    worker = LifeStageUpdaterWorker()

    try:
        if args.continuous:
            await worker.run_forever(interval_seconds=args.interval)
        else:
            result = await worker.run_once()
            print("Life stage update complete:")
            print(f"  Pets scanned: {result.scanned_count}")
            print(f"  Pets updated: {result.updated_count}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
