"""Greedy word-cloud placement along an expanding spiral with collision testing."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .constants import (
    CENTER_Y_STEPS,
    DEFAULT_CENTER_Y_PERCENT,
    DEFAULT_SPIRAL_SETTINGS,
    VARYING_SIZE_THRESHOLD,
)
from .models import PlacedSponsor, SponsorRecord
from .ranking import rank_sponsors
from .sizing import footprint, resolve_variant

logger = logging.getLogger("gyb")


@dataclass(frozen=True)
class SpiralSettings:
    """Tunable spiral search constants (defaults reproduce the reference layout)."""

    angle_step: float = DEFAULT_SPIRAL_SETTINGS["angle_step"]
    radius_step: float = DEFAULT_SPIRAL_SETTINGS["radius_step"]
    jitter_amplitude: float = DEFAULT_SPIRAL_SETTINGS["jitter_amplitude"]
    jitter_frequency: float = DEFAULT_SPIRAL_SETTINGS["jitter_frequency"]
    vertical_compression: float = DEFAULT_SPIRAL_SETTINGS["vertical_compression"]
    max_attempts: int = DEFAULT_SPIRAL_SETTINGS["max_attempts"]
    collision_padding: float = DEFAULT_SPIRAL_SETTINGS["collision_padding"]
    margin_x: float = DEFAULT_SPIRAL_SETTINGS["margin_x"]
    margin_y: float = DEFAULT_SPIRAL_SETTINGS["margin_y"]
    first_start_radius: float = DEFAULT_SPIRAL_SETTINGS["first_start_radius"]
    start_radius: float = DEFAULT_SPIRAL_SETTINGS["start_radius"]
    fallback_angle_step: float = DEFAULT_SPIRAL_SETTINGS["fallback_angle_step"]
    fallback_base_radius: float = DEFAULT_SPIRAL_SETTINGS["fallback_base_radius"]
    fallback_radius_step: float = DEFAULT_SPIRAL_SETTINGS["fallback_radius_step"]
    default_container_width: float = DEFAULT_SPIRAL_SETTINGS["default_container_width"]
    min_container_height: float = DEFAULT_SPIRAL_SETTINGS["min_container_height"]
    height_per_sponsor: float = DEFAULT_SPIRAL_SETTINGS["height_per_sponsor"]


def center_y_percent(base_sizes: Sequence[float]) -> float:
    """
    Vertical position of the cloud centre as a fraction of container height.

    Uniform batches sit at 0.31; batches with varying sizes move the centre
    down (0.33 from a largest size of 20, 0.35 from 24) to leave room for
    the large items.
    """
    if not base_sizes:
        return DEFAULT_CENTER_Y_PERCENT

    largest = max(base_sizes)
    if largest - min(base_sizes) <= VARYING_SIZE_THRESHOLD:
        return DEFAULT_CENTER_Y_PERCENT

    for threshold, percent in CENTER_Y_STEPS:
        if largest >= threshold:
            return percent
    return DEFAULT_CENTER_Y_PERCENT


def boxes_collide(candidate: tuple, placed: np.ndarray, padding: float) -> np.ndarray:
    """
    Test a candidate box against an (n, 4) array of placed boxes.

    Boxes are (x, y, width, height). Two boxes collide unless one ends,
    plus ``padding``, strictly before the other starts on either axis.
    Candidate corners may be (m, 1) arrays to test m candidates at once.

    Returns:
        np.ndarray: Boolean array, True where the candidate collides
        (shape (n,) for a scalar candidate, (m, n) for array corners).
    """
    x, y, width, height = candidate
    px, py, pw, ph = placed[:, 0], placed[:, 1], placed[:, 2], placed[:, 3]
    separated = (
        (x + width + padding < px)
        | (px + pw + padding < x)
        | (y + height + padding < py)
        | (py + ph + padding < y)
    )
    return ~separated


class SpiralPlacer:
    """Place sponsor boxes without overlap, largest first, on an elliptical spiral."""

    def __init__(self, settings: SpiralSettings | None = None) -> None:
        self.settings = settings or SpiralSettings()

    def container_size(
        self,
        num_sponsors: int,
        width: float | None = None,
        height: float | None = None,
    ) -> tuple[float, float]:
        """Resolve container size; height grows with the sponsor count."""
        settings = self.settings
        resolved_width = float(width) if width else settings.default_container_width
        minimum_height = float(height) if height else settings.min_container_height
        resolved_height = max(minimum_height, num_sponsors * settings.height_per_sponsor)
        return resolved_width, resolved_height

    def _clamp(self, x: np.ndarray, y: np.ndarray, width: float, height: float,
               container_width: float, container_height: float) -> tuple[np.ndarray, np.ndarray]:
        settings = self.settings
        x = np.maximum(settings.margin_x, np.minimum(x, container_width - width - settings.margin_x))
        y = np.maximum(settings.margin_y, np.minimum(y, container_height - height - settings.margin_y))
        return x, y

    def candidates(
        self,
        index: int,
        width: float,
        height: float,
        center: tuple[float, float],
        container: tuple[float, float],
    ) -> tuple[np.ndarray, np.ndarray]:
        """Return the clamped top-left corners tried for the ``index``-th box, in attempt order."""
        settings = self.settings
        start_radius = settings.first_start_radius if index == 0 else settings.start_radius
        attempts = np.arange(settings.max_attempts, dtype=float)

        angle = attempts * settings.angle_step
        jitter = np.sin(attempts * settings.jitter_frequency) * settings.jitter_amplitude
        radius = start_radius + attempts * settings.radius_step + jitter

        x = center[0] + radius * np.cos(angle) - width / 2
        y = center[1] + radius * np.sin(angle) * settings.vertical_compression - height / 2
        return self._clamp(x, y, width, height, *container)

    def fallback_position(
        self,
        index: int,
        width: float,
        height: float,
        center: tuple[float, float],
        container: tuple[float, float],
    ) -> tuple[float, float]:
        """Deterministic spot used when the spiral search finds no free space."""
        settings = self.settings
        angle = index * settings.fallback_angle_step
        radius = settings.fallback_base_radius + index * settings.fallback_radius_step
        x = center[0] + radius * math.cos(angle) - width / 2
        y = center[1] + radius * math.sin(angle) * settings.vertical_compression - height / 2
        xs, ys = self._clamp(np.array([x]), np.array([y]), width, height, *container)
        return float(xs[0]), float(ys[0])

    def place(
        self,
        sponsors: Sequence[SponsorRecord],
        display_type: str,
        container_width: float,
        container_height: float,
    ) -> list[PlacedSponsor]:
        """
        Compute non-overlapping coordinates for every sponsor.

        Sponsors are processed by descending base size (stable). Each box is
        tried at successive spiral points around the cloud centre and accepted
        at the first point whose padded box clears every box placed before it.
        Placed boxes are never moved. When the attempt budget runs out the box
        goes to a fixed fallback point, so every sponsor gets a coordinate.

        Args:
            sponsors: Eligible sponsors (already filtered).
            display_type: Campaign sponsor display type, used to size each box.
            container_width: Container width in px.
            container_height: Container height in px.

        Returns:
            list[PlacedSponsor]: One entry per sponsor, in placement order.
        """
        if not sponsors:
            return []

        settings = self.settings
        ordered = rank_sponsors(sponsors, "", "word-cloud")
        container = (float(container_width), float(container_height))
        center = (
            container[0] / 2,
            container[1] * center_y_percent([sponsor.base_size for sponsor in ordered]),
        )

        placed: list[PlacedSponsor] = []
        boxes = np.empty((0, 4), dtype=float)
        fallbacks = 0
        for index, sponsor in enumerate(ordered):
            variant = resolve_variant(sponsor, display_type)
            width, height = footprint(sponsor, variant)
            xs, ys = self.candidates(index, width, height, center, container)

            if len(boxes) == 0:
                free = np.arange(len(xs))
            else:
                candidate = (xs[:, np.newaxis], ys[:, np.newaxis], width, height)
                collisions = boxes_collide(candidate, boxes, settings.collision_padding).any(axis=1)
                free = np.flatnonzero(~collisions)

            if free.size:
                x, y = float(xs[free[0]]), float(ys[free[0]])
                is_fallback = False
            else:
                x, y = self.fallback_position(index, width, height, center, container)
                is_fallback = True
                fallbacks += 1
                logger.warning(
                    f"No free spot for sponsor '{sponsor.name}' after {settings.max_attempts} attempts; "
                    "using fallback position"
                )

            placed.append(
                PlacedSponsor(
                    sponsor=sponsor,
                    variant=variant,
                    width=width,
                    height=height,
                    rank=index + 1,
                    x=x,
                    y=y,
                    fallback=is_fallback,
                )
            )
            boxes = np.vstack([boxes, [x, y, width, height]])

        logger.debug(
            "Placed %d sponsor(s) in %.0fx%.0f container (%d fallback)",
            len(placed),
            container[0],
            container[1],
            fallbacks,
        )
        return placed
