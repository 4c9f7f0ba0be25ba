"""
Ray path cross sections and travel-time curves.
"""

from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..coordinates import CoordinateConverter
from ..model import VelocityModel
from ..phase import PhaseName
from ..raypath import RayPath, as_phase


class RayPlotter:
    """Cross sections of a velocity model with ray paths drawn through it."""

    def __init__(self, model: VelocityModel) -> None:
        self.model = model

    def plot_cross_section(
        self,
        rays: Sequence[Tuple[RayPath, Union[str, PhaseName]]],
        event_radius: Optional[float] = None,
        fig_size: Tuple[int, int] = (10, 10),
        view: str = "full",
        ax: Optional[plt.Axes] = None,
    ) -> Figure:
        """Draw ray paths in a circular cross section.

        Parameters
        ----------
        rays : sequence of (RayPath, phase)
            Rays to draw; phases that do not exist for a ray are skipped.
        event_radius : float, optional
            Source radius in km (default: the surface).
        fig_size : Tuple[int, int]
            Figure size (width, height)
        view : str
            'upper' for the upper half, 'full' for the whole planet
        ax : matplotlib.axes.Axes, optional
            Axes to draw on. If None, creates a new figure.
        """
        if view not in ("full", "upper"):
            raise ValueError(f"view must be 'full' or 'upper', got {view!r}")
        if ax is None:
            fig, ax = plt.subplots(figsize=fig_size)
        else:
            fig = ax.figure

        theta_full = np.linspace(0.0, 2 * np.pi, 360)
        self._fill_layers(ax, theta_full)
        self._plot_boundaries(ax, theta_full)

        radius = self.model.radius
        er = radius if event_radius is None else float(event_radius)
        drawn = self._plot_ray_paths(ax, rays, er)

        x, y = CoordinateConverter.polar_to_cartesian(er, np.pi / 2)
        ax.plot(x, y, "r*", markersize=20, markeredgecolor="black",
                markeredgewidth=1, label="Source")

        ax.set_xlim(-radius * 1.1, radius * 1.1)
        if view == "full":
            ax.set_ylim(-radius * 1.1, radius * 1.1)
        else:
            ax.set_ylim(-radius * 0.15, radius * 1.1)
        ax.set_aspect("equal")
        ax.set_xlabel("Distance (km)")
        ax.set_ylabel("Height (km)")
        ax.set_title(
            f"Ray Paths, Model: {self.model.name}\n"
            f"Source depth: {radius - er:.1f} km, {drawn} ray(s)"
        )
        ax.legend(bbox_to_anchor=(1.05, 1.0), loc="upper left")
        return fig

    def _fill_layers(self, ax: plt.Axes, theta_full: np.ndarray) -> None:
        ax.fill(
            self.model.radius * np.cos(theta_full),
            self.model.radius * np.sin(theta_full),
            color="saddlebrown",
            alpha=0.4,
            label="Mantle",
        )
        if self.model.has_core:
            cmb = self.model.core_mantle_boundary
            ax.fill(cmb * np.cos(theta_full), cmb * np.sin(theta_full),
                    color="red", alpha=0.5, label="Outer Core")
        if self.model.has_inner_core:
            icb = self.model.inner_core_boundary
            ax.fill(icb * np.cos(theta_full), icb * np.sin(theta_full),
                    color="gold", alpha=0.6, label="Inner Core")

    def _plot_boundaries(self, ax: plt.Axes, theta: np.ndarray) -> None:
        ax.plot(self.model.radius * np.cos(theta), self.model.radius * np.sin(theta),
                "k-", linewidth=3, label="Surface")
        for disc in self.model.get_discontinuities(include_radius=False):
            r = disc["radius"]
            if r in (self.model.core_mantle_boundary, self.model.inner_core_boundary):
                ax.plot(r * np.cos(theta), r * np.sin(theta), "k--", linewidth=2, alpha=0.8)
            else:
                ax.plot(r * np.cos(theta), r * np.sin(theta), "k:", linewidth=0.5, alpha=0.5)

    def _plot_ray_paths(self, ax: plt.Axes, rays, event_radius: float) -> int:
        colors = [
            "blue", "red", "green", "purple",
            "brown", "pink", "gray", "cyan",
        ]
        drawn = 0
        for i, (ray, phase) in enumerate(rays):
            phase = as_phase(phase)
            points = ray.path_points(phase, event_radius)
            if points.size == 0:
                continue
            x, y = CoordinateConverter.path_to_cartesian(points)
            time = ray.travel_time(phase, event_radius)
            ax.plot(x, y, color=colors[i % len(colors)], linewidth=2,
                    label=f"{phase} ({time:.1f}s)")
            drawn += 1
        return drawn

    def plot_travel_time_curves(
        self,
        sections: Dict[str, np.ndarray],
        event_radius: Optional[float] = None,
        fig_size: Tuple[int, int] = (12, 8),
    ) -> Figure:
        """Plot record sections against distance.

        Parameters
        ----------
        sections : Dict[str, np.ndarray]
            Phase name to the (N, 3) array returned by
            :meth:`RayCatalog.record_section`.
        event_radius : float, optional
            Source radius in km, used in the title.
        """
        fig, ax = plt.subplots(figsize=fig_size)
        for phase, rows in sections.items():
            rows = np.asarray(rows, dtype=float).reshape(-1, 3)
            mask = np.isfinite(rows[:, 1])
            if np.any(mask):
                ax.plot(rows[mask, 0], rows[mask, 1], "o", label=phase, markersize=3)
        depth = 0.0 if event_radius is None else self.model.radius - event_radius
        ax.set_xlabel("Distance (degrees)")
        ax.set_ylabel("Travel Time (seconds)")
        ax.set_title(f"Travel Time Curves\nSource depth: {depth:.1f} km, Model: {self.model.name}")
        ax.legend()
        ax.grid(True, alpha=0.3)
        return fig

    def plot_delta_curve(
        self,
        paths: List[RayPath],
        phases: Sequence[Union[str, PhaseName]],
        event_radius: Optional[float] = None,
        fig_size: Tuple[int, int] = (10, 6),
    ) -> Figure:
        """Plot epicentral distance against ray parameter (branch structure)."""
        fig, ax = plt.subplots(figsize=fig_size)
        p = np.array([path.ray_parameter for path in paths])
        for phase in phases:
            delta = np.array([path.epicentral_distance(phase, event_radius) for path in paths])
            ax.plot(p, np.degrees(delta), label=str(as_phase(phase)), linewidth=2)
        ax.set_xlabel("Ray parameter (s/rad)")
        ax.set_ylabel("Distance (degrees)")
        ax.set_title(f"Distance vs Ray Parameter, Model: {self.model.name}")
        ax.legend()
        ax.grid(True, alpha=0.3)
        return fig
