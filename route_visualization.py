import logging
from typing import Optional

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from constants import ROUTE_MAP_FILENAME, VISUALIZATION_DPI, VISUALIZATION_SIZE
from problem import Problem
from route_model import Solution, format_hours

logger = logging.getLogger(__name__)

def plot_problem(problem: Problem, solution: Optional[Solution] = None,
                 filename: Optional[str] = ROUTE_MAP_FILENAME, title: Optional[str] = None):
    #map of bases and targets, with the legs of a solution on top
    fig, ax = plt.subplots(figsize=VISUALIZATION_SIZE)
    fig.suptitle(title or "Bases and Targets", fontsize=18)
    ax.set_xlabel('X coordinate', fontsize=14)
    ax.set_ylabel('Y coordinate', fontsize=14)

    xs = [b.x for b in problem.bases]
    ys = [b.y for b in problem.bases]
    ax.scatter(xs, ys, c='black', marker='s', s=150, label='Base', zorder=3)
    for b in problem.bases:
        ax.text(b.x, b.y + 8, f"B{b.id}", ha='center', fontsize=12, weight='bold')

    visited = set(solution.visited_target_ids) if solution else set()
    for t in problem.targets: #size follows weight
        color = 'tab:green' if t.id in visited else 'tab:gray'
        ax.scatter(t.x, t.y, c=color, s=20 + 12 * t.weight, alpha=0.8, zorder=2)
        ax.text(t.x + 3, t.y + 3, f"{t.id}", fontsize=8)

    if solution:
        colors = plt.cm.tab10.colors
        for leg, sub_path in enumerate(solution.sub_paths):
            points = [sub_path.start_base] + list(sub_path.targets) + [sub_path.end_base]
            ax.plot([p.x for p in points], [p.y for p in points], '-', color=colors[leg % len(colors)],
                    alpha=0.7, linewidth=1.5, label=f"Leg {leg + 1} (w={sub_path.total_weight})")
        summary_text = (f"Total weight: {solution.total_weight}\n"
                        f"Time in air: {format_hours(solution.total_time_in_air)}\n"
                        f"Max per leg: {format_hours(problem.max_time_in_air_in_hours)}")
        fig.text(0.02, 0.02, summary_text, fontsize=12, bbox=dict(facecolor='white', alpha=0.7))

    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal', adjustable='datalim')
    ax.legend(loc='upper right', fontsize=10)
    plt.tight_layout(rect=[0, 0.05, 1, 0.95])

    if filename:
        plt.savefig(filename, dpi=VISUALIZATION_DPI, bbox_inches='tight')
        logger.info(f"route map saved: {filename}")
    return fig
