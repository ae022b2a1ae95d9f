"""
Observation-time and path-storage scaffolding for vector-valued processes.

Holds the time grid, the (d+1, c) path buffer and the observation cursor.
Subclasses fill the buffer.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from mvbrownian.exceptions import ProcessStateError
from mvbrownian.model.time_grid import TimeStepCache


class MultivariateStochasticProcess:
    """Base class owning the observation grid, path buffer and cursor.

    The buffer is a contiguous row-major array of shape (d+1, c); row ``j``
    is the observation at time ``t[j]`` and row 0 holds ``x0``.

    Parameters
    ----------
    copy_on_return : bool
        If False (default) path accessors return a read-only view of the live
        buffer, which later generation calls overwrite. If True they return
        copies.
    """

    def __init__(self, copy_on_return: bool = False):
        self.c = 0
        self.x0: NDArray[np.float64] = np.empty(0)
        self.copy_on_return = copy_on_return
        self.time_steps: TimeStepCache | None = None
        self._path: NDArray[np.float64] = np.empty((0, 0))
        self.observation_index = 0

    # ------------------------------------------------------------------
    # Observation times
    # ------------------------------------------------------------------
    @property
    def observation_times_set(self) -> bool:
        return self.time_steps is not None

    @property
    def dimension(self) -> int:
        return self.c

    @property
    def n_observation_times(self) -> int:
        """Number of steps d; the grid holds d+1 times."""
        return self.time_steps.d if self.time_steps is not None else 0

    def set_observation_times(self, times: Sequence[float] | NDArray[np.float64]) -> None:
        """Use ``times`` (t[0] < ... < t[d]) as the observation grid."""
        self.time_steps = TimeStepCache(times)
        self.init()

    def set_observation_times_equally(self, delta: float, d: int, t0: float = 0.0) -> None:
        """Use the grid t[j] = t0 + j * delta, j = 0..d."""
        self.time_steps = TimeStepCache.equally_spaced(delta, d, t0)
        self.init()

    def get_observation_times(self) -> NDArray[np.float64]:
        self._require_grid()
        return self.time_steps.t

    def init(self) -> None:
        """Allocate the path buffer for the current grid and reset the cursor."""
        d = self.time_steps.d
        self._path = np.empty((d + 1, self.c), dtype=np.float64)
        self._path[0] = self.x0[: self.c]
        self.observation_index = 0

    def _require_grid(self) -> None:
        if self.time_steps is None:
            raise ProcessStateError("observation times have not been set")

    # ------------------------------------------------------------------
    # Path access
    # ------------------------------------------------------------------
    def _expose(self, arr: NDArray[np.float64]) -> NDArray[np.float64]:
        if self.copy_on_return:
            return arr.copy()
        view = arr.view()
        view.flags.writeable = False
        return view

    def get_path(self) -> NDArray[np.float64]:
        """Return the path buffer, shape (d+1, c).

        Entries past the current observation index are undefined.
        """
        self._require_grid()
        return self._expose(self._path)

    def get_observation(self, j: int, i: int) -> float:
        """Value of coordinate ``i`` at observation ``j``."""
        self._require_grid()
        return float(self._path[j, i])

    def get_current_observation(self) -> NDArray[np.float64]:
        self._require_grid()
        return self._path[self.observation_index].copy()

    def get_current_observation_index(self) -> int:
        return self.observation_index

    def has_next_observation(self) -> bool:
        return self.time_steps is not None and self.observation_index < self.time_steps.d

    def reset_start_process(self) -> None:
        """Move the cursor back to t[0] and restore x0 in the first row."""
        self._require_grid()
        self._path[0] = self.x0[: self.c]
        self.observation_index = 0

    def get_x0(self) -> NDArray[np.float64]:
        return self.x0
