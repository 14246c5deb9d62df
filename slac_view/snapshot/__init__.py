"""
Snapshot Layer
==============

Bounded Context: Estimator state consumed by the renderer.

Responsibilities:
- Represent particles, traces and landmark estimates
- Select the best particle (highest weight, first occurrence wins)

Non-responsibilities:
- Filtering, resampling, weighting (owned by the estimator)
- Drawing (handled by rendering)
"""

from slac_view.snapshot.particles import (
    Pose,
    Trace,
    User,
    LandmarkEstimate,
    Particle,
    LandmarkInitSet,
    ParticleSet,
)

__all__ = [
    "Pose",
    "Trace",
    "User",
    "LandmarkEstimate",
    "Particle",
    "LandmarkInitSet",
    "ParticleSet",
]
