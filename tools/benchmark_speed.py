"""
Performance Benchmark
=====================

Measures frame throughput of the core step, the Gym wrapper and the
numpy renderer.

Usage:
    python -m tools.benchmark_speed [--steps S] [--seed SEED] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from waterdrop.drop_core.config_loader import load_config
from waterdrop.drop_core.game import CoreGame
from waterdrop.drop_core.env_gym import DropEnv
from waterdrop.drop_core.render_solid import SolidRenderer


def should_flap(game: CoreGame) -> bool:
    """Scripted pilot: flap when falling below the centre of the next gap."""
    drop = game.drop
    target = game.config.board.height / 2
    for ob in game.obstacles:
        if not ob.scored:
            target = ob.gap_y + ob.gap_height * 0.6
            break
    return drop.y > target and drop.vy > 0


def benchmark_core_game(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CoreGame without Gym overhead.

    Args:
        num_steps: Number of frames.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed)
    frame_ms = config.observation.frame_ms

    now = 0.0
    runs = 1
    best = 0
    game.start(now, seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        if should_flap(game):
            game.activate(now)
        now += frame_ms
        result = game.step(now)
        if result.terminated:
            best = max(best, game.score)
            game.start(now)
            runs += 1

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_steps": num_steps,
        "runs": runs,
        "best_score": max(best, game.score),
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_single_env(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark the Gym environment with random actions.

    Args:
        num_steps: Number of steps to run.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = DropEnv()
    rng = np.random.default_rng(seed)

    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        action = int(rng.random() < 0.08)
        obs, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "gym_env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_solid_render(
    num_frames: int = 200,
    seed: int = 42
) -> dict:
    """
    Benchmark the numpy renderer on a live game.

    Args:
        num_frames: Number of frames to render.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed)
    renderer = SolidRenderer(config)
    width = config.observation.image_width
    height = config.observation.image_height

    now = 0.0
    game.start(now, seed=seed)
    start = time.perf_counter()

    for _ in range(num_frames):
        if should_flap(game):
            game.activate(now)
        now += config.observation.frame_ms
        if game.step(now).terminated:
            game.start(now)
        renderer.render(game.get_render_data(), width, height)

    elapsed = time.perf_counter() - start
    renderer.close()

    return {
        "mode": "solid_render",
        "num_steps": num_frames,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_frames / elapsed,
        "ms_per_step": (elapsed * 1000) / num_frames
    }


def run_all_benchmarks(steps: int = 5000, seed: int = 42) -> list:
    """Run all benchmarks and print a summary."""
    results = []

    print("=" * 60)
    print("WATER DROP PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking CoreGame (raw)...")
    result = benchmark_core_game(num_steps=steps, seed=seed)
    results.append(result)
    print(f"  Frames/sec: {result['steps_per_second']:.1f}")
    print(f"  Runs: {result['runs']}, best score: {result['best_score']}")
    print()

    print("Benchmarking DropEnv...")
    result = benchmark_single_env(num_steps=steps, seed=seed)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print()

    print("Benchmarking SolidRenderer...")
    result = benchmark_solid_render(num_frames=max(1, steps // 10), seed=seed)
    results.append(result)
    print(f"  Frames/sec: {result['steps_per_second']:.1f}")
    print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 44)

    for r in results:
        print(f"{r['mode']:<20} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Water Drop performance")
    parser.add_argument("--steps", type=int, default=5000, help="Frames per benchmark")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 500 if args.quick else args.steps
    run_all_benchmarks(steps=steps, seed=args.seed)

    return 0


if __name__ == "__main__":
    sys.exit(main())
