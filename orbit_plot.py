import argparse

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.widgets import Slider

from catalog import iter_bodies, load_catalog
from physics import OrbitalMotion


def trace_paths(root, end_time, samples=2000):
    """
    World (x, z) path of every orbiting body between time 0 and `end_time`.
    Moons come out as epicycloids because their parent moves along with them.

    Returns:
        dict: {name: (samples, 2) array}
    """
    motion = OrbitalMotion(root)
    names = [body.name for body, parent in iter_bodies(root) if parent is not None]
    paths = {name: np.empty((samples, 2)) for name in names}
    times = np.linspace(0, end_time, samples)
    for i, t in enumerate(times):
        motion.simulation_time = t
        motion.recompute()
        for name in names:
            pos = motion.position_of(name)
            paths[name][i] = (pos[0], pos[2])
    return paths


def plot_catalog(root, end_time=365.0, samples=2000):
    """Top-down view of the catalog with a time slider moving the body markers."""
    paths = trace_paths(root, end_time, samples)
    colors = {body.name: body.color for body, _ in iter_bodies(root)}

    fig, ax = plt.subplots(figsize=(9, 9))
    plt.subplots_adjust(bottom=0.15) # Make room for the slider
    fig.patch.set_facecolor('black')
    ax.set_facecolor('black')
    ax.set_aspect('equal')
    ax.tick_params(axis='x', colors='grey', labelsize=6)
    ax.tick_params(axis='y', colors='grey', labelsize=6)
    for spine in ax.spines.values():
        spine.set_color('grey')
    ax.set_xlabel("X", color='grey')
    ax.set_ylabel("Z", color='grey')

    ax.scatter([0], [0], s=80, color=colors[root.name])
    for name, path in paths.items():
        ax.plot(path[:, 0], path[:, 1], color=colors[name], linewidth=0.5, alpha=0.6)

    names = list(paths)
    markers = ax.scatter([paths[n][0, 0] for n in names], [paths[n][0, 1] for n in names],
                         s=12, color=[colors[n] for n in names])

    def update_plot(val):
        i = int(round(val / end_time * (samples - 1))) if end_time else 0
        markers.set_offsets([paths[n][i] for n in names])
        ax.set_title(f"Orbits | t = {val:.1f}", color='white', fontsize=12)
        fig.canvas.draw_idle()

    ax_time = plt.axes([0.2, 0.05, 0.65, 0.03], facecolor='grey')
    slider_time = Slider(ax_time, 'Time', 0, end_time, valinit=0, color='grey')
    slider_time.label.set_color('grey')
    slider_time.valtext.set_color('grey')
    slider_time.on_changed(update_plot)
    update_plot(0)
    return fig, slider_time


def main(argv=None):
    parser = argparse.ArgumentParser(description="Plot the orbits of a catalog from above")
    parser.add_argument("--catalog", default=None, help="Catalog JSON file.")
    parser.add_argument("--days", type=float, default=365.0, help="Length of the traced paths.")
    args = parser.parse_args(argv)

    fig, slider = plot_catalog(load_catalog(args.catalog), end_time=args.days)
    plt.show()


if __name__ == "__main__":
    main()
