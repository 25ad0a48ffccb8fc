"""Background workers for the subscription service"""
from .life_stage_updater import LifeStageUpdaterWorker

__all__ = ["LifeStageUpdaterWorker"]
