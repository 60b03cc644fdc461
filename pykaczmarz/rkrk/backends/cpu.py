"""
CPU backend for the Randomized Double Kaczmarz method.

Runs two coupled randomized Kaczmarz sweeps in lockstep: each iteration
projects x onto the hyperplane of one sampled row of U (target y), then
projects b onto the hyperplane of one sampled row of V, using the entry of
the freshly updated x at the V row index as the target.

Parallelism is confined to pure computations: the two probability vectors
are built concurrently during setup, and each iteration draws its U and V
rows concurrently. The updates themselves run strictly in sequence.
"""

from __future__ import annotations

import warnings
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pykaczmarz.core.compute.norms import VectorMath
from pykaczmarz.core.compute.timing import Timer
from pykaczmarz.core.exceptions import DegenerateMatrixError, NumericDegeneracyError
from pykaczmarz.core.result import Result
from pykaczmarz.rkrk._common import RKRKParams, ZeroRowPolicy
from pykaczmarz.rkrk._sampling import row_probabilities, sample_row
from pykaczmarz.rkrk.design import RKRKDesign


class CPURKRKBackend:
    """
    CPU backend for RK-RK.

    Implements the Backend protocol for RKRKDesign -> RKRKParams.
    All worker pools are created per solve() call and shut down before it
    returns.
    """

    @property
    def name(self) -> str:
        return 'cpu_rkrk'

    def solve(self, design: RKRKDesign) -> Result[RKRKParams]:
        """
        Run the RK-RK iteration.

        Algorithm (per iteration, k = 0 .. iterations-1):
            1. Draw i from U's rows and j from V's rows, concurrently
            2. x ← x + (y[i] - U[i]·x) / ||U[i]||² · U[i]
            3. b ← b + (x[j] - V[j]·b) / ||V[j]||² · V[j]
            4. errors[k] = ||b - B||²  (if tracking)

        Raises:
            DegenerateMatrixError: If a squared Frobenius norm underflows to 0
            NumericDegeneracyError: If a zero-norm row is hit and
                design.on_zero_row == 'raise'
            SamplingError: If bounded row sampling gives up
            IndexError: If a sampled V row index is not a valid index into x
        """
        timer = Timer()
        timer.start()

        U, V, y, B = design.U, design.V, design.y, design.B
        urows, ucols = U.shape
        vrows, vcols = V.shape
        warnings_list: list[str] = []

        if vrows > ucols:
            msg = (
                f"V has {vrows} rows but x has only {ucols} entries; "
                f"sampling a V row with index >= {ucols} will raise IndexError"
            )
            warnings.warn(msg, RuntimeWarning, stacklevel=2)
            warnings_list.append(msg)

        seed_seq = np.random.SeedSequence(design.seed)

        with VectorMath(design.n_workers) as vm, ThreadPoolExecutor(
            max_workers=2, thread_name_prefix='pykaczmarz-rkrk'
        ) as executor:

            with timer.section('setup'):
                u_frobenius = vm.frobenius_squared(U)
                v_frobenius = vm.frobenius_squared(V)
                _check_frobenius(u_frobenius, 'U')
                _check_frobenius(v_frobenius, 'V')

                x = np.zeros(ucols, dtype=np.float64)
                b = np.zeros(vcols, dtype=np.float64)
                errors = (
                    np.empty(design.iterations, dtype=np.float64)
                    if design.track_errors else None
                )

            with timer.section('probabilities'):
                u_prob, v_prob = _join(
                    executor.submit(row_probabilities, U, u_frobenius, vm),
                    executor.submit(row_probabilities, V, v_frobenius, vm),
                )

            with timer.section('iterations'):
                for k in range(design.iterations):
                    u_seq, v_seq = seed_seq.spawn(2)
                    u_row, v_row = _join(
                        executor.submit(
                            sample_row, u_prob, urows,
                            np.random.default_rng(u_seq), design.max_attempts,
                        ),
                        executor.submit(
                            sample_row, v_prob, vrows,
                            np.random.default_rng(v_seq), design.max_attempts,
                        ),
                    )

                    project_onto_row(
                        x, U[u_row], y[u_row], vm, design.on_zero_row,
                        iteration=k, matrix_name='U', row_index=u_row,
                    )
                    # x[v_row]: V's row index addresses x directly
                    project_onto_row(
                        b, V[v_row], x[v_row], vm, design.on_zero_row,
                        iteration=k, matrix_name='V', row_index=v_row,
                    )

                    if errors is not None:
                        errors[k] = vm.squared_norm(b - B)

        for name, vec in (('x', x), ('b', b)):
            if not np.all(np.isfinite(vec)):
                msg = (
                    f"{name} contains non-finite values "
                    f"(zero-norm row or overflow in the update)"
                )
                warnings.warn(msg, RuntimeWarning, stacklevel=2)
                warnings_list.append(msg)

        timer.stop()

        params = RKRKParams(
            x=x,
            b=b,
            errors=errors,
            iterations=design.iterations,
            u_probabilities=u_prob,
            v_probabilities=v_prob,
        )

        info: dict[str, Any] = {
            'method': 'rkrk',
            'iterations': design.iterations,
            'track_errors': design.track_errors,
            'n_workers': design.n_workers,
            'seed': design.seed,
            'max_attempts': design.max_attempts,
            'on_zero_row': design.on_zero_row,
            'urows': urows,
            'ucols': ucols,
            'vrows': vrows,
            'vcols': vcols,
            'u_frobenius_squared': u_frobenius,
            'v_frobenius_squared': v_frobenius,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


def project_onto_row(
    estimate: NDArray[np.floating[Any]],
    row: NDArray[np.floating[Any]],
    target: float,
    vector_math: VectorMath,
    on_zero_row: ZeroRowPolicy = 'propagate',
    *,
    iteration: int | None = None,
    matrix_name: str | None = None,
    row_index: int | None = None,
) -> None:
    """
    One Kaczmarz step, in place.

    estimate ← estimate + (target - row·estimate) / ||row||² · row

    With on_zero_row='propagate' a zero row yields inf/NaN entries
    without raising; with 'raise' it raises NumericDegeneracyError
    before estimate is modified.
    """
    row_norm = vector_math.squared_norm(row)
    if row_norm == 0.0 and on_zero_row == 'raise':
        raise NumericDegeneracyError(
            f"{matrix_name}: row {row_index} has zero squared norm "
            f"(iteration {iteration})",
            iteration=iteration,
            matrix_name=matrix_name,
            row=row_index,
        )
    with np.errstate(divide='ignore', invalid='ignore'):
        step = (target - row @ estimate) / np.float64(row_norm)
        estimate += step * row


def _join(*futures):
    """Wait for every future, then return their results in order."""
    wait(futures)
    return tuple(f.result() for f in futures)


def _check_frobenius(frobenius_squared: float, name: str) -> None:
    if frobenius_squared == 0.0:
        raise DegenerateMatrixError(
            f"{name}: squared Frobenius norm is zero (entries too small to "
            f"square in double precision), row probabilities are undefined",
            matrix_name=name,
            frobenius_squared=frobenius_squared,
        )
