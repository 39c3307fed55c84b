"""Tests for error diffusion and the dithering pass."""

import numpy as np
import pytest

from rasterprint.core.diffuse import ErrorDiffuser
from rasterprint.core.dither import DitherEngine
from rasterprint.core.kernels import Kernel, KernelName
from rasterprint.core.threshold import LuminanceThresholder


def _solid(width: int, height: int, rgba=(100, 100, 100, 255)) -> np.ndarray:
    return np.tile(np.array(rgba, dtype=np.int32), (height, width, 1))


def _engine(pattern=KernelName.ATKINSON, divisor=8, threshold=128) -> DitherEngine:
    return DitherEngine(
        LuminanceThresholder.create(threshold),
        ErrorDiffuser(Kernel.create(pattern, divisor)),
    )


class TestErrorDiffuser:
    def test_spreads_error_forward(self):
        buf = _solid(4, 3)
        diffuser = ErrorDiffuser(Kernel.create(KernelName.ATKINSON, 8))
        diffuser.diffuse(buf, (100, 100, 100, 255), (0, 0, 0, 255), 1, 1, 4, 3)

        # 100 + 100 * 1 / 8 = 112.5, rounded up
        for y, x in [(1, 2), (1, 3), (2, 1), (2, 2)]:
            assert list(buf[y, x]) == [113, 113, 113, 255]
        # First column is never a target
        assert list(buf[2, 0]) == [100, 100, 100, 255]
        # Already visited pixels are untouched
        assert list(buf[1, 0]) == [100, 100, 100, 255]
        assert list(buf[1, 1]) == [100, 100, 100, 255]

    def test_first_row_never_receives_error(self):
        buf = _solid(6, 3)
        diffuser = ErrorDiffuser(Kernel.create(KernelName.JARVIS_JUDICE_NINKE, 48))
        diffuser.diffuse(buf, (100, 100, 100, 255), (0, 0, 0, 255), 0, 0, 6, 3)

        assert (buf[0, :, :3] == 100).all()
        # Column 0 is an edge, so row 1 only receives at columns 1 and 2
        assert (buf[1, 0, :3] == 100).all()
        # 100 + 100 * 5 / 48 and 100 + 100 * 3 / 48
        assert list(buf[1, 1, :3]) == [110, 110, 110]
        assert list(buf[1, 2, :3]) == [106, 106, 106]
        assert (buf[1, 3:, :3] == 100).all()

    def test_per_channel_error(self):
        buf = _solid(3, 2, (10, 20, 30, 99))
        diffuser = ErrorDiffuser(Kernel.create([[0, 1], [0, 1]], 1))
        diffuser.diffuse(buf, (50, 60, 70, 99), (0, 0, 0, 99), 1, 0, 3, 2)

        assert list(buf[1, 2]) == [60, 80, 100, 99]

    def test_results_are_clamped(self):
        buf = _solid(3, 2, (250, 5, 128, 255))
        diffuser = ErrorDiffuser(Kernel.create([[0, 1], [0, 1]], 1))
        diffuser.diffuse(buf, (100, 0, 0, 255), (0, 100, 0, 255), 1, 0, 3, 2)

        assert list(buf[1, 2]) == [255, 0, 128, 255]

    def test_alpha_untouched(self):
        buf = _solid(3, 3, (10, 10, 10, 42))
        diffuser = ErrorDiffuser(Kernel.create(KernelName.ATKINSON, 8))
        diffuser.diffuse(buf, (200, 200, 200, 0), (255, 255, 255, 0), 0, 1, 3, 3)
        assert (buf[:, :, 3] == 42).all()


class TestDitherEngine:
    def test_output_is_black_or_white(self):
        rng = np.random.default_rng(7)
        data = rng.integers(0, 256, size=(12, 9, 4), dtype=np.uint8)
        result = _engine().dither(data, 9, 12)

        assert result.shape == (12, 9, 4)
        assert set(np.unique(result[:, :, :3])) <= {0, 255}

    def test_alpha_preserved(self):
        rng = np.random.default_rng(3)
        data = rng.integers(0, 256, size=(5, 6, 4), dtype=np.uint8)
        result = _engine().dither(data, 6, 5)
        assert (result[:, :, 3] == data[:, :, 3]).all()

    def test_input_not_mutated(self):
        data = bytearray([100, 100, 100, 255] * 16)
        before = bytes(data)
        _engine().dither(data, 4, 4)
        assert bytes(data) == before

    def test_numpy_input_not_mutated(self):
        data = _solid(4, 4)
        before = data.copy()
        result = _engine().dither(data, 4, 4)
        assert (data == before).all()
        assert not np.shares_memory(result, data)

    def test_hand_computed_gray_square(self):
        # (0,0) black -> (1,1) gets 12.5 -> 113
        # (1,0) black -> (1,1) gets 12.5 -> 126
        # (0,1) black -> (1,1) gets 12.5 -> 139, which is light
        result = _engine().dither(_solid(2, 2), 2, 2)
        assert list(result[0, 0, :3]) == [0, 0, 0]
        assert list(result[0, 1, :3]) == [0, 0, 0]
        assert list(result[1, 0, :3]) == [0, 0, 0]
        assert list(result[1, 1, :3]) == [255, 255, 255]

    def test_all_white_stays_white(self):
        result = _engine().dither(_solid(5, 5, (255, 255, 255, 255)), 5, 5)
        assert (result[:, :, :3] == 255).all()

    def test_all_black_stays_black(self):
        result = _engine().dither(_solid(5, 5, (0, 0, 0, 255)), 5, 5)
        assert (result[:, :, :3] == 0).all()

    def test_mean_roughly_preserved(self):
        data = _solid(32, 32, (128, 128, 128, 255))
        result = _engine(KernelName.JARVIS_JUDICE_NINKE, 48).dither(data, 32, 32)
        white = (result[:, :, 0] == 255).mean()
        assert 0.25 < white < 0.75

    def test_size_mismatch_rejected(self):
        with pytest.raises(ValueError, match="expected 64"):
            _engine().dither(bytes(60), 4, 4)
