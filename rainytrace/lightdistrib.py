"""Distributions for choosing which light source to sample."""

from __future__ import annotations

import abc
from typing import Optional, Sequence

from rainytrace.geometry import Vector3
from rainytrace.sampling import Distribution1D


class LightDistribution(abc.ABC):
    """Gives a light-sampling distribution for a point in space."""

    @abc.abstractmethod
    def lookup(self, p: Vector3) -> Optional[Distribution1D]:
        """Distribution over the scene's lights to use at point ``p``."""


class UniformDistribution(LightDistribution):
    """Every light is equally likely, wherever the point is."""

    def __init__(self, lights: Sequence) -> None:
        self._distrib = Distribution1D([1.0] * len(lights))

    def lookup(self, p: Vector3) -> Distribution1D:
        return self._distrib


def light_power_distribution(lights: Sequence) -> Optional[Distribution1D]:
    """Distribution proportional to each light's emitted power; None if no lights."""
    if not lights:
        return None
    return Distribution1D(light.power().luminance() for light in lights)


class PowerDistribution(LightDistribution):
    """Lights are chosen in proportion to their power, wherever the point is."""

    def __init__(self, lights: Sequence) -> None:
        self._distrib = light_power_distribution(lights)

    def lookup(self, p: Vector3) -> Optional[Distribution1D]:
        return self._distrib