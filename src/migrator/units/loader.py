"""Resolve unit files to executable objects."""

from __future__ import annotations

import functools
import importlib.util
import inspect
import sys
from dataclasses import dataclass
from types import ModuleType
from typing import Callable

from loguru import logger

from ..core.exceptions import UnitLoadError
from ..core.types import UnitDescriptor, UnitKind
from .base import BaseUnit, UnitContext

_MODULE_PREFIX = "migrator_units"


@dataclass
class LoadedUnit:
    """A unit ready to execute.

    Attributes:
        unit: Descriptor the unit was loaded from.
        apply: Required apply operation.
        revert: Optional revert operation.
        dispose: Optional release of resources the unit acquired.
    """

    unit: UnitDescriptor
    apply: Callable[[], object]
    revert: Callable[[], object] | None = None
    dispose: Callable[[], object] | None = None


def dispose_unit(loaded: LoadedUnit) -> None:
    """Call the unit's dispose operation; failures are logged, not raised."""
    if loaded.dispose is None:
        return
    try:
        loaded.dispose()
    except Exception as e:
        logger.warning(f"Dispose of {loaded.unit.filename} failed: {e}")


class FileUnitLoader:
    """Loads unit files from disk with importlib.

    A unit file either defines one ``BaseUnit`` subclass (instantiated with
    the UnitContext) or module-level functions taking the context. The
    function names come from the unit kind: ``up``/``down`` for migrations,
    ``run``/``down`` for seeders, ``close`` for disposal.

    Modules are re-executed on every load so edits between runs are seen,
    and are not left behind in ``sys.modules``.
    """

    def __init__(self, kind: UnitKind):
        """Initialize with the unit kind.

        Args:
            kind: Unit kind that names the operations to look up.
        """
        self.kind = kind

    def load(self, unit: UnitDescriptor, ctx: UnitContext) -> LoadedUnit:
        """Import a unit file and bind its operations to ``ctx``.

        Raises:
            UnitLoadError: If the file cannot be imported or does not expose
                the kind's apply operation.
        """
        module = self._import(unit)

        unit_class = self._find_unit_class(unit, module)
        if unit_class is not None:
            try:
                target = unit_class(ctx)
            except Exception as e:
                raise UnitLoadError(unit, f"cannot instantiate {unit_class.__name__}: {e}") from e

            def bind(fn: Callable) -> Callable:
                return fn
        else:
            target = module

            def bind(fn: Callable) -> Callable:
                return functools.partial(fn, ctx)

        apply = self._operation(target, self.kind.apply_name)
        if apply is None:
            raise UnitLoadError(unit, f"must define a {self.kind.apply_name!r} operation")

        revert = self._operation(target, self.kind.revert_name)
        dispose = self._operation(target, self.kind.dispose_name)
        return LoadedUnit(
            unit=unit,
            apply=bind(apply),
            revert=bind(revert) if revert else None,
            dispose=bind(dispose) if dispose else None,
        )

    def _import(self, unit: UnitDescriptor) -> ModuleType:
        if not unit.path.is_file():
            raise UnitLoadError(unit, f"file not found: {unit.path}")

        module_name = f"{_MODULE_PREFIX}_{self.kind.label}_{unit.path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, unit.path)
        if spec is None or spec.loader is None:
            raise UnitLoadError(unit, f"cannot import {unit.path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise UnitLoadError(unit, f"import failed: {e}") from e
        finally:
            # Only registered while the module body runs.
            sys.modules.pop(module_name, None)

        logger.debug(f"Imported {unit.filename} as {module_name}")
        return module

    def _find_unit_class(self, unit: UnitDescriptor, module: ModuleType) -> type | None:
        classes = [
            obj
            for obj in vars(module).values()
            if inspect.isclass(obj)
            and issubclass(obj, BaseUnit)
            and obj.__module__ == module.__name__
        ]
        if len(classes) > 1:
            names = ", ".join(sorted(cls.__name__ for cls in classes))
            raise UnitLoadError(unit, f"defines more than one unit class ({names})")
        return classes[0] if classes else None

    @staticmethod
    def _operation(target: object, name: str) -> Callable | None:
        fn = getattr(target, name, None)
        return fn if callable(fn) else None
