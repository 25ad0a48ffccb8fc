"""Unit tests for LifeStageUpdaterWorker

Tests cover:
- Worker initialization with configuration
- run_once execution
- Job disabled scenario
- Error handling
- Shutdown and cleanup
"""

import pytest
from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Error, Return
from src.app.use_cases.pets import LifeStageUpdateResultDTO
from src.worker.life_stage_updater import LifeStageUpdaterWorker


@pytest.fixture
def sample_result():
    return LifeStageUpdateResultDTO(
        updated_count=3,
        scanned_count=120,
        run_date=date(2024, 6, 15),
        started_at=datetime(2024, 6, 15, 1, 0),
        execution_time_ms=85,
    )


@pytest.fixture
def mock_session_factory():
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


@pytest.mark.asyncio
class TestLifeStageUpdaterWorkerInit:
    @patch("src.worker.life_stage_updater.ApplicationConfig")
    @patch("src.worker.life_stage_updater.sessionmaker")
    @patch("src.worker.life_stage_updater.create_async_engine")
    def test_initializes_with_default_config(
        self, mock_create_engine, mock_sessionmaker, mock_app_config
    ):
        """
        Given: No custom configuration provided
        When: Worker is initialized
        Then: Engine is created from ApplicationConfig.DB_URI
        """
        mock_app_config.DB_URI = "postgresql+asyncpg://default@localhost/db"
        mock_app_config.LIFE_STAGE_BATCH_SIZE = 500

        worker = LifeStageUpdaterWorker()

        assert worker.batch_size == 500
        assert mock_create_engine.call_args[0][0] == "postgresql+asyncpg://default@localhost/db"
        mock_sessionmaker.assert_called_once()

    @patch("src.worker.life_stage_updater.create_async_engine")
    def test_uses_given_session_factory(self, mock_create_engine, mock_session_factory):
        worker = LifeStageUpdaterWorker(batch_size=50, session_factory=mock_session_factory)

        assert worker.batch_size == 50
        assert worker.async_session_factory is mock_session_factory
        mock_create_engine.assert_not_called()


@pytest.mark.asyncio
class TestLifeStageUpdaterWorkerRunOnce:
    @patch("src.worker.life_stage_updater.ApplicationConfig")
    @patch("src.worker.life_stage_updater.UpdatePetLifeStages")
    async def test_run_once_executes_update(
        self, mock_use_case_class, mock_app_config, mock_session_factory, sample_result
    ):
        """
        Given: Life stage job is enabled
        When: run_once is called
        Then: Executes the use case with the configured chunk size
        """
        mock_app_config.LIFE_STAGE_JOB_ENABLED = True
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(return_value=Return.ok(sample_result))
        mock_use_case_class.return_value = mock_use_case

        worker = LifeStageUpdaterWorker(batch_size=200, session_factory=mock_session_factory)
        result = await worker.run_once()

        assert result.updated_count == 3
        assert result.scanned_count == 120
        command = mock_use_case.execute.call_args[0][0]
        assert command.batch_size == 200

    @patch("src.worker.life_stage_updater.ApplicationConfig")
    @patch("src.worker.life_stage_updater.UpdatePetLifeStages")
    async def test_run_once_skips_when_disabled(
        self, mock_use_case_class, mock_app_config, mock_session_factory
    ):
        mock_app_config.LIFE_STAGE_JOB_ENABLED = False

        worker = LifeStageUpdaterWorker(batch_size=10, session_factory=mock_session_factory)
        result = await worker.run_once()

        assert result.updated_count == 0
        assert result.scanned_count == 0
        mock_use_case_class.assert_not_called()

    @patch("src.worker.life_stage_updater.ApplicationConfig")
    @patch("src.worker.life_stage_updater.UpdatePetLifeStages")
    async def test_run_once_raises_on_failure(
        self, mock_use_case_class, mock_app_config, mock_session_factory
    ):
        mock_app_config.LIFE_STAGE_JOB_ENABLED = True
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(
            return_value=Return.err(
                Error(
                    code="UPDATE_PET_LIFE_STAGES_FAILED",
                    message="Failed to update pet life stages",
                    reason="connection lost",
                )
            )
        )
        mock_use_case_class.return_value = mock_use_case

        worker = LifeStageUpdaterWorker(batch_size=10, session_factory=mock_session_factory)

        with pytest.raises(RuntimeError, match="Failed to update pet life stages"):
            await worker.run_once()


@pytest.mark.asyncio
class TestLifeStageUpdaterWorkerShutdown:
    @patch("src.worker.life_stage_updater.ApplicationConfig")
    @patch("src.worker.life_stage_updater.sessionmaker")
    @patch("src.worker.life_stage_updater.create_async_engine")
    async def test_shutdown_disposes_engine(
        self, mock_create_engine, mock_sessionmaker, mock_app_config
    ):
        mock_app_config.DB_URI = "sqlite+aiosqlite://"
        mock_app_config.LIFE_STAGE_BATCH_SIZE = 500
        engine = MagicMock()
        engine.dispose = AsyncMock()
        mock_create_engine.return_value = engine

        worker = LifeStageUpdaterWorker()
        await worker.shutdown()

        engine.dispose.assert_called_once()
