"""Benchmark incremental insertion against scipy's batch Delaunay.

Inserts a random point cloud one point at a time and reports throughput,
flip counts and (optionally) whether the result matches qhull.
"""

import numpy as np
import time
import argparse
import logging
from pathlib import Path
import json

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from scipy.spatial import Delaunay

from deltri import Triangulation, bounding_square, check_triangulation
from deltri.core.diagnostics import matches_reference, mesh_summary


def make_points(n, seed=0, distribution='uniform'):
    """Random test cloud in the unit square (or a gaussian blob)."""
    rng = np.random.default_rng(seed)
    if distribution == 'gaussian':
        return rng.normal(0.5, 0.15, size=(n, 2))
    return rng.uniform(0.0, 1.0, size=(n, 2))


def benchmark_incremental(points, validate_every=0):
    cx, cy, size = bounding_square(points)
    tri = Triangulation(len(points) + 4)
    tri.setup(cx, cy, size)
    t0 = time.perf_counter()
    for i, (x, y) in enumerate(points.tolist(), start=1):
        tri.insert(x, y)
        if validate_every and i % validate_every == 0:
            ok, msgs = check_triangulation(tri)
            if not ok:
                logger.error("invalid after %d inserts: %s", i, msgs[:3])
                break
    elapsed = time.perf_counter() - t0
    stats = tri.stats_summary()['insert']
    logger.info("incremental: %d points in %.3f s (%.1f us/point), %.2f flips/point, %.2f steps/point",
                len(points), elapsed, 1e6 * elapsed / max(len(points), 1),
                stats['flips_per_success'], stats['steps_per_attempt'])
    return tri, {'time': elapsed, 'stats': stats, 'summary': mesh_summary(tri)}


def benchmark_scipy(tri):
    pts = np.asarray(tri.points)
    t0 = time.perf_counter()
    Delaunay(pts)
    elapsed = time.perf_counter() - t0
    logger.info("scipy.spatial.Delaunay: %d points in %.4f s", len(pts), elapsed)
    return {'time': elapsed}


def main():
    parser = argparse.ArgumentParser(description='Benchmark incremental Delaunay insertion')
    parser.add_argument('--n-points', type=int, default=5000,
                       help='Number of points to insert (default: 5000)')
    parser.add_argument('--seed', type=int, default=0,
                       help='RNG seed (default: 0)')
    parser.add_argument('--distribution', choices=['uniform', 'gaussian'], default='uniform',
                       help='Point distribution (default: uniform)')
    parser.add_argument('--validate-every', type=int, default=0,
                       help='Run the full conformity check every N inserts (0: never)')
    parser.add_argument('--compare', action='store_true',
                       help='Compare the result with scipy.spatial.Delaunay')
    parser.add_argument('--output', type=str, default=None,
                       help='Output JSON file for results')

    args = parser.parse_args()

    points = make_points(args.n_points, args.seed, args.distribution)
    tri, results = benchmark_incremental(points, args.validate_every)
    tri.print_stats()

    if args.compare:
        results['scipy'] = benchmark_scipy(tri)
        results['matches_scipy'] = matches_reference(tri)
        logger.info("matches scipy: %s", results['matches_scipy'])

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(results, f, indent=2, default=str)
        logger.info(f"Results saved to {args.output}")


if __name__ == '__main__':
    main()
