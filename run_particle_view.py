"""
Particle View Demo
==================

Drives SurfaceRenderer with a synthetic particle filter replay and writes
the frames to a video.

The replay is a noisy outward spiral walk: particles fan out around the
true path, two landmarks start as init swarms and converge halfway
through. The path eventually reaches the padding margin, so the viewport
grows during the run.

Usage:
    python run_particle_view.py --steps 300 --particles 30
    python run_particle_view.py --config config/renderer.yaml
"""

import argparse
import math
from pathlib import Path
from typing import Iterator, List, Optional

import numpy as np
import supervision as sv

from slac_view import (
    LandmarkEstimate,
    LandmarkInitSet,
    Particle,
    ParticleSet,
    Pose,
    RasterSurface,
    RendererConfig,
    SurfaceRenderer,
    Trace,
    User,
)
from utils import get_target_run_folder

LANDMARKS = {
    "beacon_a": (6.0, 4.0),
    "beacon_b": (-5.0, -7.0),
}


class SpiralReplay:
    """
    Synthetic snapshot source.

    Design: stands in for the estimator; each step appends one pose per
    particle and yields a fresh ParticleSet.
    """

    def __init__(self, n_particles: int, steps: int, seed: int = 0):
        self.n_particles = n_particles
        self.steps = steps
        self.rng = np.random.default_rng(seed)
        self.traces: List[Trace] = [Trace([Pose(0.0, 0.0, 0.0)]) for _ in range(n_particles)]
        self.drift = self.rng.normal(0.0, 0.02, size=(n_particles, 2))

    def _true_pose(self, step: int) -> Pose:
        theta = step * 0.08
        radius = 0.5 + step * 0.06
        return Pose(radius * math.cos(theta), radius * math.sin(theta), theta)

    def _init_set(self, step: int) -> LandmarkInitSet:
        if step >= self.steps // 2:
            return LandmarkInitSet()

        spread = 3.0 * (1.0 - step / (self.steps / 2)) + 0.3
        return LandmarkInitSet(particle_set_map={
            landmark_id: tuple(
                LandmarkEstimate(x=float(x), y=float(y))
                for x, y in self.rng.normal((lx, ly), spread, size=(40, 2))
            )
            for landmark_id, (lx, ly) in LANDMARKS.items()
        })

    def _landmarks(self, step: int) -> tuple:
        if step < self.steps // 2:
            return ()
        return tuple(
            LandmarkEstimate(x=lx, y=ly, name=landmark_id)
            for landmark_id, (lx, ly) in LANDMARKS.items()
        )

    def __iter__(self) -> Iterator[ParticleSet]:
        for step in range(1, self.steps + 1):
            true_pose = self._true_pose(step)
            noise = self.rng.normal(0.0, 0.05, size=(self.n_particles, 2))
            weights = self.rng.random(self.n_particles)
            landmarks = self._landmarks(step)

            particles = []
            for idx, trace in enumerate(self.traces):
                offset = self.drift[idx] * step + noise[idx]
                trace.append(Pose(true_pose.x + offset[0], true_pose.y + offset[1], true_pose.theta))
                particles.append(Particle(
                    user=User(trace=trace),
                    landmarks=landmarks,
                    weight=float(weights[idx]),
                ))

            yield ParticleSet(particles, landmark_init_set=self._init_set(step))


def process_replay(
    config: RendererConfig,
    steps: int,
    n_particles: int,
    fps: int,
    seed: int,
) -> str:
    target_run_folder = get_target_run_folder(application_name="particle_view")
    target_video_path = f"{target_run_folder}/output.mp4"

    surface = RasterSurface(
        logical_size_wh=config.surface_size_wh,
        device_pixel_ratio=config.device_pixel_ratio,
    )
    renderer = SurfaceRenderer.from_config(surface, config)

    video_info = sv.VideoInfo(width=surface.width, height=surface.height, fps=fps)

    with sv.VideoSink(target_path=target_video_path, video_info=video_info) as out_video_sink:
        for particle_set in SpiralReplay(n_particles, steps, seed=seed):
            renderer.render(particle_set)
            out_video_sink.write_frame(surface.frame)

    print(f"Replay rendered. Output: {target_video_path}")
    print(f"Final viewport: x_max={renderer.viewport.x_max:.1f}, y_max={renderer.viewport.y_max:.1f}")
    return target_video_path


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Render a synthetic particle filter replay")
    parser.add_argument("--config", type=Path, default=None, help="Renderer YAML config")
    parser.add_argument("--steps", type=int, default=300, help="Filter updates to replay")
    parser.add_argument("--particles", type=int, default=30, help="Particles per snapshot")
    parser.add_argument("--fps", type=int, default=20, help="Output video FPS")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    args = parser.parse_args(argv)

    config = RendererConfig.from_yaml(args.config) if args.config else RendererConfig()
    process_replay(config, args.steps, args.particles, args.fps, args.seed)


if __name__ == "__main__":
    main()
