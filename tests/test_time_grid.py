"""Unit tests for the observation grid."""

import numpy as np
import pytest

from mvbrownian.model.time_grid import TimeStepCache


class TestTimeStepCache:
    def test_steps_and_square_roots(self):
        ts = TimeStepCache([0.0, 0.25, 1.0, 3.0])
        assert ts.d == 3
        np.testing.assert_allclose(ts.dt, [0.25, 0.75, 2.0])
        np.testing.assert_allclose(ts.sqrdt, np.sqrt([0.25, 0.75, 2.0]))

    def test_equally_spaced(self):
        ts = TimeStepCache.equally_spaced(0.5, 4, t0=1.0)
        np.testing.assert_allclose(ts.t, [1.0, 1.5, 2.0, 2.5, 3.0])
        np.testing.assert_allclose(ts.dt, 0.5)

    def test_refresh_follows_patched_times(self):
        ts = TimeStepCache([0.0, 1.0, 2.0])
        ts.t[1] = 0.5
        np.testing.assert_allclose(ts.dt, [1.0, 1.0])
        ts.refresh()
        np.testing.assert_allclose(ts.dt, [0.5, 1.5])

    @pytest.mark.parametrize("times", [[0.0], [0.0, 1.0, 1.0], [1.0, 0.5]])
    def test_invalid_times(self, times):
        with pytest.raises(ValueError):
            TimeStepCache(times)

    def test_invalid_spacing(self):
        with pytest.raises(ValueError, match="delta"):
            TimeStepCache.equally_spaced(0.0, 3)
