"""
Solution wrapper for RK-RK results.

RKRKSolution wraps Result[RKRKParams] and provides convenient accessors,
the (iteration, residual) trace consumed by plotting code, and a plain
text summary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pykaczmarz.core.result import Result
from pykaczmarz.rkrk._common import RKRKParams

if TYPE_CHECKING:
    from pykaczmarz.rkrk.design import RKRKDesign


@dataclass
class RKRKSolution:
    """
    User-facing RK-RK results.

    Holds the final iterates x and b and, when error tracking was on,
    the per-iteration squared error ||b - B||².
    """
    _result: Result[RKRKParams]
    _design: 'RKRKDesign'

    # --- Iterates ---

    @property
    def x(self) -> NDArray[np.floating[Any]]:
        """Final iterate for U x ≈ y, shape (ucols,)."""
        return self._result.params.x

    @property
    def b(self) -> NDArray[np.floating[Any]]:
        """Final iterate for V b ≈ x, shape (vcols,)."""
        return self._result.params.b

    @property
    def errors(self) -> NDArray[np.floating[Any]] | None:
        """Squared error ||b - B||² after each iteration, or None if untracked."""
        return self._result.params.errors

    @property
    def iterations(self) -> int:
        return self._result.params.iterations

    @property
    def final_error(self) -> float | None:
        """Last tracked squared error; None if untracked or no iterations ran."""
        errors = self.errors
        if errors is None or errors.shape[0] == 0:
            return None
        return float(errors[-1])

    @property
    def u_probabilities(self) -> NDArray[np.floating[Any]]:
        """Row-sampling distribution over U."""
        return self._result.params.u_probabilities

    @property
    def v_probabilities(self) -> NDArray[np.floating[Any]]:
        """Row-sampling distribution over V."""
        return self._result.params.v_probabilities

    def error_trace(self) -> list[tuple[int, float]]:
        """
        Error trace as (iteration_index, residual) pairs, in iteration order.

        This is the sequence a plotting collaborator consumes, e.g.
        ``ax.scatter(*zip(*solution.error_trace()))``.

        Raises:
            ValueError: If the solve ran with track_errors=False.
        """
        if self.errors is None:
            raise ValueError(
                "Error trace not recorded; solve with track_errors=True"
            )
        return [(i, float(e)) for i, e in enumerate(self.errors)]

    # --- Metadata ---

    @property
    def design(self) -> 'RKRKDesign':
        return self._design

    @property
    def seed(self) -> int | None:
        """Root sampling seed, or None if the run was nondeterministic."""
        return self._design.seed

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def has_warning(self, substring: str) -> bool:
        return self._result.has_warning(substring)

    # --- Display ---

    def summary(self) -> str:
        """
        Plain-text report.

        Produces:
            RANDOMIZED DOUBLE KACZMARZ (RK-RK)

            U: 3 x 3    V: 3 x 3
            Iterations: 5000
            ...
        """
        d = self._design
        lines = [
            "\nRANDOMIZED DOUBLE KACZMARZ (RK-RK)",
            "",
            f"U: {d.urows} x {d.ucols}    V: {d.vrows} x {d.vcols}",
            f"Iterations: {self.iterations}",
            f"Norm workers: {d.n_workers}",
            f"Seed: {d.seed}",
            f"||x||: {np.linalg.norm(self.x):.6g}",
            f"||b||: {np.linalg.norm(self.b):.6g}",
        ]

        if self.errors is not None and self.errors.shape[0] > 0:
            lines.append(f"Initial squared error: {self.errors[0]:.6g}")
            lines.append(f"Final squared error:   {self.errors[-1]:.6g}")

        if self.timing is not None:
            lines.append(f"Time: {self.timing['total_seconds']:.4f}s")

        if self.warnings:
            lines.append("")
            lines.append("Warnings:")
            lines.extend(f"  {w}" for w in self.warnings)

        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"RKRKSolution(iterations={self.iterations}, "
            f"ucols={self.x.shape[0]}, vcols={self.b.shape[0]}, "
            f"final_error={self.final_error}, "
            f"backend={self.backend_name!r})"
        )
