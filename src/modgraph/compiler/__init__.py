"""Orchestration: the Modules entry point."""

from .modules import Modules, ModuleParsedResult

__all__ = ["Modules", "ModuleParsedResult"]
