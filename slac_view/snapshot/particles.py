"""
Particle Snapshot Types
=======================

Bounded Context: Estimator state as seen by the renderer (read-only).

The estimator owns these objects; the renderer only reads them through
duck-typed access (``best_particle()``, ``particles()``,
``landmark_init_set.particle_set_map``, ``user.trace.values()``,
``landmarks``). Any object exposing the same surface can be rendered.

Design:
- Value objects (Pose, LandmarkEstimate) are frozen dataclasses
- Trace is append-only: no removal, no truncation
- to_dict()/from_dict() for JSON replays
- Coordinates are NOT validated: non-finite values pass through untouched
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Pose:
    """
    Single user pose in filter space.

    Attributes:
        x: East offset (meters)
        y: North offset (meters)
        theta: Heading (radians)
    """

    x: float
    y: float
    theta: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y, 'theta': self.theta}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Pose':
        try:
            return cls(
                x=float(data['x']),
                y=float(data['y']),
                theta=float(data.get('theta', 0.0)),
            )
        except KeyError as e:
            raise ValueError(f"Missing required Pose field: {e}")


class Trace:
    """
    Append-only, chronologically ordered pose history.

    Traces are shared by reference between particles and renders, so the
    only mutation offered is append().

    Example:
        >>> trace = Trace([Pose(0, 0)])
        >>> trace.append(Pose(0.5, 0))
        >>> len(trace.values())
        2
    """

    def __init__(self, poses: Iterable[Pose] = ()):
        self._poses: List[Pose] = list(poses)

    def append(self, pose: Pose) -> None:
        """Append a pose at the end of the trace."""
        self._poses.append(pose)

    def values(self) -> Tuple[Pose, ...]:
        """All poses, oldest first."""
        return tuple(self._poses)

    def __len__(self) -> int:
        return len(self._poses)

    def __repr__(self) -> str:
        return f"Trace(poses={len(self._poses)})"

    def to_dict(self) -> List[Dict[str, float]]:
        return [pose.to_dict() for pose in self._poses]

    @classmethod
    def from_dict(cls, data: Sequence[Mapping[str, Any]]) -> 'Trace':
        return cls(Pose.from_dict(item) for item in data)


@dataclass
class User:
    """One user hypothesis: its pose trace."""

    trace: Trace = field(default_factory=Trace)

    def to_dict(self) -> Dict[str, Any]:
        return {'trace': self.trace.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'User':
        return cls(trace=Trace.from_dict(data.get('trace', [])))


@dataclass(frozen=True)
class LandmarkEstimate:
    """
    Point estimate of a landmark (converged or init-swarm candidate).

    Attributes:
        x: East offset (meters)
        y: North offset (meters)
        name: Optional display label
    """

    x: float
    y: float
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'x': self.x, 'y': self.y}
        if self.name is not None:
            data['name'] = self.name
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'LandmarkEstimate':
        try:
            return cls(x=float(data['x']), y=float(data['y']), name=data.get('name'))
        except KeyError as e:
            raise ValueError(f"Missing required LandmarkEstimate field: {e}")


@dataclass
class Particle:
    """
    One weighted hypothesis: user pose trace plus converged landmarks.

    Invariants:
        - weight >= 0
    """

    user: User
    landmarks: Tuple[LandmarkEstimate, ...] = ()
    weight: float = 1.0

    def __post_init__(self):
        if self.weight < 0:
            raise ValueError(f"Particle weight must be >= 0, got {self.weight}")
        self.landmarks = tuple(self.landmarks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user': self.user.to_dict(),
            'landmarks': [landmark.to_dict() for landmark in self.landmarks],
            'weight': self.weight,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Particle':
        return cls(
            user=User.from_dict(data.get('user', {})),
            landmarks=tuple(LandmarkEstimate.from_dict(lm) for lm in data.get('landmarks', [])),
            weight=float(data.get('weight', 1.0)),
        )


@dataclass
class LandmarkInitSet:
    """
    Unconverged landmark swarms.

    Attributes:
        particle_set_map: landmark id -> candidate estimates (ordered)
    """

    particle_set_map: Dict[str, Tuple[LandmarkEstimate, ...]] = field(default_factory=dict)

    def __post_init__(self):
        self.particle_set_map = {
            landmark_id: tuple(candidates)
            for landmark_id, candidates in self.particle_set_map.items()
        }

    def __len__(self) -> int:
        return len(self.particle_set_map)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            landmark_id: [candidate.to_dict() for candidate in candidates]
            for landmark_id, candidates in self.particle_set_map.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Sequence[Mapping[str, Any]]]) -> 'LandmarkInitSet':
        return cls(particle_set_map={
            str(landmark_id): tuple(LandmarkEstimate.from_dict(c) for c in candidates)
            for landmark_id, candidates in data.items()
        })


class ParticleSet:
    """
    Snapshot of the particle filter handed to the renderer once per update.

    Example:
        >>> best = Particle(user=User(), weight=0.7)
        >>> ps = ParticleSet([Particle(user=User(), weight=0.3), best])
        >>> ps.best_particle() is best
        True
    """

    def __init__(
        self,
        particles: Iterable[Particle] = (),
        landmark_init_set: Optional[LandmarkInitSet] = None,
    ):
        self._particles: Tuple[Particle, ...] = tuple(particles)
        self.landmark_init_set = landmark_init_set or LandmarkInitSet()

    def particles(self) -> Tuple[Particle, ...]:
        """All particles."""
        return self._particles

    def best_particle(self) -> Optional[Particle]:
        """
        Highest-weight particle; ties go to the first occurrence.

        Returns:
            The best particle, or None for an empty set
        """
        best: Optional[Particle] = None
        for particle in self._particles:
            if best is None or particle.weight > best.weight:
                best = particle
        return best

    def __len__(self) -> int:
        return len(self._particles)

    def __repr__(self) -> str:
        return (
            f"ParticleSet(particles={len(self._particles)}, "
            f"init_landmarks={len(self.landmark_init_set)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'particles': [particle.to_dict() for particle in self._particles],
            'landmark_init_set': self.landmark_init_set.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ParticleSet':
        return cls(
            particles=[Particle.from_dict(p) for p in data.get('particles', [])],
            landmark_init_set=LandmarkInitSet.from_dict(data.get('landmark_init_set', {})),
        )
