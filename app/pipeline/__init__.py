from app.pipeline.base import StageHandler, StageOutcome

__all__ = ["StageHandler", "StageOutcome"]
