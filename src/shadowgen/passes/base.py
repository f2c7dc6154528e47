"""
Base Pass System

Rust Pattern: rustc_mir::transform::MirPass
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set, Tuple, Type

from ..shared.errors import ErrorReporter, ShadowgenImplementationError
from ..shared.nodes import ImplUnit
from ..utils.config import DEFAULT_ARGS_FILE, DEFAULT_SOURCE_FILE

logger = logging.getLogger(__name__)


class ExpansionContext:
    """
    Per-expansion state holder (Rust naming analogue: rustc_middle::ty::TyCtxt).

    One context per invocation; nothing in it outlives the expansion.
    Passes read their inputs from here and store their results here rather
    than on themselves.

    - `source_files`: text of every pseudo file diagnostics may point into
    - `args_source` / `args_span` / `args_file`: where the unit marker's
      argument text lives (`args_span` of None means the whole text)
    - `original_unit`: the parsed input, never mutated
    - `unit_directive`: set by DirectiveParsingPass
    """

    def __init__(self, source_file: str = DEFAULT_SOURCE_FILE):
        self.reporter: ErrorReporter = ErrorReporter({})
        self.source_files: Dict[str, str] = self.reporter.source_files
        self.source_file = source_file

        self.parser = None
        self.args_source: str = ""
        self.args_file: str = DEFAULT_ARGS_FILE
        self.args_span: Optional[Tuple[int, int]] = None

        self.original_unit: Optional[ImplUnit] = None
        self.unit_directive = None

        self._analysis_results: Dict[Type['BasePass'], Any] = {}

    def get_analysis(self, pass_class: Type['BasePass']) -> Any:
        """Get analysis results from a pass"""
        if pass_class not in self._analysis_results:
            raise ShadowgenImplementationError(f"Analysis {pass_class.__name__} not available")
        return self._analysis_results[pass_class]

    def set_analysis(self, pass_class: Type['BasePass'], results: Any) -> None:
        """Store analysis results"""
        self._analysis_results[pass_class] = results

    def has_analysis(self, pass_class: Type['BasePass']) -> bool:
        return pass_class in self._analysis_results


class BasePass(ABC):
    """
    Base class for all expansion passes.

    Rust Pattern: rustc_mir::transform::MirPass

    - Explicit dependencies via `requires`
    - Results stored in ExpansionContext (not in the pass)
    - Immutable nodes: passes return a new unit instead of mutating
    """
    requires: List[Type['BasePass']] = []

    @abstractmethod
    def run(self, unit: ImplUnit, ctx: ExpansionContext) -> ImplUnit:
        """Run pass on the unit being generated and return the new unit."""
        raise NotImplementedError


class PassManager:
    """
    Pass manager with dependency resolution.

    Rust Pattern: rustc driver with pass scheduling

    Passes run in topological order of their `requires`; registration order
    breaks ties.
    """

    def __init__(self):
        self.passes: List[Type[BasePass]] = []
        self._dependency_graph: Dict[Type[BasePass], Set[Type[BasePass]]] = {}

    def register_pass(self, pass_class: Type[BasePass]) -> None:
        """Register a pass"""
        self.passes.append(pass_class)
        self._dependency_graph[pass_class] = set(pass_class.requires)

    def run_all(self, unit: ImplUnit, ctx: ExpansionContext) -> ImplUnit:
        """Run all passes in dependency order, threading the unit through."""
        for pass_class in self._topological_sort():
            logger.debug(f"running {pass_class.__name__}")
            unit = pass_class().run(unit, ctx)
        return unit

    def _topological_sort(self) -> List[Type[BasePass]]:
        """Topological sort of passes by dependencies"""
        for pass_class, deps in self._dependency_graph.items():
            missing = [d.__name__ for d in deps if d not in self._dependency_graph]
            if missing:
                raise ShadowgenImplementationError(
                    f"{pass_class.__name__} requires unregistered pass(es): {', '.join(missing)}"
                )

        in_degree = {p: len(self._dependency_graph[p]) for p in self.passes}
        queue = [p for p, degree in in_degree.items() if degree == 0]
        result = []

        while queue:
            pass_class = queue.pop(0)
            result.append(pass_class)

            for other_pass in self.passes:
                if pass_class in self._dependency_graph[other_pass]:
                    in_degree[other_pass] -= 1
                    if in_degree[other_pass] == 0:
                        queue.append(other_pass)

        if len(result) != len(self.passes):
            raise ShadowgenImplementationError("Circular dependency detected in passes")

        return result
