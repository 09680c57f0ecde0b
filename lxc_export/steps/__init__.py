"""Build steps and the state they share with the orchestrator."""

from .export import StepExport, export_container
from .state import ConsoleUi, StateBag, Ui


__all__ = ["ConsoleUi", "StateBag", "StepExport", "Ui", "export_container"]
