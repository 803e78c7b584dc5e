"""Sample generators that feed the integrators."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import List, Optional

from rainytrace.geometry import Point2
from rainytrace.rng import RNG


@dataclass
class CameraSample:
    """Film and lens positions used to generate a camera ray."""

    p_film: Point2 = field(default_factory=Point2)
    p_lens: Point2 = field(default_factory=Point2)


class Sampler(abc.ABC):
    """Produces sample values for each pixel, one sample vector at a time."""

    def __init__(self, samples_per_pixel: int) -> None:
        self.samples_per_pixel = samples_per_pixel
        self.current_pixel: Optional[Point2] = None
        self.current_pixel_sample_index = 0

    @abc.abstractmethod
    def get_1d(self) -> float:
        """Next sample dimension."""

    @abc.abstractmethod
    def get_2d(self) -> Point2:
        """Next two sample dimensions."""

    def camera_sample(self, x: int, y: int) -> CameraSample:
        """Camera sample for the pixel at ``(x, y)``."""
        p_film = Point2(float(x), float(y)) + self.get_2d()
        p_lens = self.get_2d()
        return CameraSample(p_film, p_lens)

    def start_pixel(self, p: Point2) -> None:
        """Begin generating samples for pixel ``p``."""
        self.current_pixel = p
        self.current_pixel_sample_index = 0

    def next_sample(self) -> bool:
        """Advance to the next sample; False once the pixel is exhausted."""
        self.current_pixel_sample_index += 1
        return self.current_pixel_sample_index < self.samples_per_pixel

    def set_sample_index(self, sample_num: int) -> bool:
        """Jump to sample ``sample_num``; False if it is past the last one."""
        self.current_pixel_sample_index = sample_num
        return self.current_pixel_sample_index < self.samples_per_pixel

    @abc.abstractmethod
    def clone(self, seed: int) -> "Sampler":
        """Independent copy of this sampler seeded with ``seed``."""


class PixelSampler(Sampler):
    """Sampler that precomputes per-pixel sample arrays.

    Dimensions beyond the precomputed arrays come from a random generator.
    Subclasses fill ``sample_array_1d`` and ``sample_array_2d`` in
    ``start_pixel``.
    """

    def __init__(
        self, samples_per_pixel: int, seed: int = 1234, n_sampled_dimensions: int = 83
    ) -> None:
        super().__init__(samples_per_pixel)
        self.rng = RNG(seed)
        self.sample_array_1d: List[List[float]] = [
            [0.0] * samples_per_pixel for _ in range(n_sampled_dimensions)
        ]
        self.sample_array_2d: List[List[Point2]] = [
            [Point2() for _ in range(samples_per_pixel)]
            for _ in range(n_sampled_dimensions)
        ]
        self.current_array_offset_1d = 0
        self.current_array_offset_2d = 0

    def _check_index(self) -> None:
        if self.current_pixel_sample_index >= self.samples_per_pixel:
            raise IndexError(
                f"sample index {self.current_pixel_sample_index} is past the "
                f"{self.samples_per_pixel} samples of the pixel"
            )

    def get_1d(self) -> float:
        self._check_index()
        if self.current_array_offset_1d < len(self.sample_array_1d):
            value = self.sample_array_1d[self.current_array_offset_1d][
                self.current_pixel_sample_index
            ]
            self.current_array_offset_1d += 1
            return value
        return self.rng.get_1d()

    def get_2d(self) -> Point2:
        self._check_index()
        if self.current_array_offset_2d < len(self.sample_array_2d):
            value = self.sample_array_2d[self.current_array_offset_2d][
                self.current_pixel_sample_index
            ]
            self.current_array_offset_2d += 1
            return value
        return self.rng.get_2d()

    def next_sample(self) -> bool:
        self.current_array_offset_1d = self.current_array_offset_2d = 0
        return super().next_sample()

    def set_sample_index(self, sample_num: int) -> bool:
        self.current_array_offset_1d = self.current_array_offset_2d = 0
        return super().set_sample_index(sample_num)


class GlobalSampler(Sampler):
    """Sampler whose samples span the whole image rather than one pixel."""

    ARRAY_START_DIM = 5

    def __init__(self, samples_per_pixel: int) -> None:
        super().__init__(samples_per_pixel)
        self.dimension = 0
        self.interval_sample_index = 0
        self.array_end_dim = self.ARRAY_START_DIM

    def get_1d(self) -> float:
        if self.ARRAY_START_DIM <= self.dimension < self.array_end_dim:
            self.dimension = self.array_end_dim
        value = self.sample_dimension(self.interval_sample_index, self.dimension)
        self.dimension += 1
        return value

    def get_2d(self) -> Point2:
        if self.dimension + 1 >= self.ARRAY_START_DIM and self.dimension < self.array_end_dim:
            self.dimension = self.array_end_dim
        p = Point2(
            self.sample_dimension(self.interval_sample_index, self.dimension),
            self.sample_dimension(self.interval_sample_index, self.dimension + 1),
        )
        self.dimension += 2
        return p

    def next_sample(self) -> bool:
        self.dimension = 0
        self.interval_sample_index = self.get_index_for_sample(
            self.current_pixel_sample_index + 1
        )
        return super().next_sample()

    def set_sample_index(self, sample_num: int) -> bool:
        self.dimension = 0
        self.interval_sample_index = self.get_index_for_sample(sample_num)
        return super().set_sample_index(sample_num)

    @abc.abstractmethod
    def get_index_for_sample(self, sample_num: int) -> int:
        """Global sample index of the current pixel's ``sample_num``-th sample."""

    @abc.abstractmethod
    def sample_dimension(self, index: int, dimension: int) -> float:
        """Value of the given dimension of the global sample ``index``."""