"""
Feigenbaum diagram and Liapunov exponent of the logistic map.

"""

from __future__ import annotations
import logging

from dynstream import logistic_grid, plot
from dynstream.analysis import diagram, lyapunov

logging.basicConfig(level=logging.INFO)

r0 = 2.8
rend = 4.0

print("Computing bifurcation diagram...")
print(f"  Parameter: r ∈ [{r0}, {rend})")

with logistic_grid((r0, rend), (0.0, 1.0), 0.002, 0.05, eager=False) as grid:
    result = diagram.sample(grid, 300, release=True)
print(f"  Total points plotted: {len(result.finite())}")

with logistic_grid((r0, rend), (0.3, 0.31), 0.002, 0.01) as grid:
    curve = lyapunov.curve_on_grid(grid, 0, 2000, transient=300)
print(f"  Liapunov exponent turns positive at r = {curve.zero_crossings()[:1]}")

ax = plot.diagram(result)
plot.savefig(ax, "feigenbaum.pdf")
ax = plot.curve(curve)
plot.savefig(ax, "liapunov.pdf")
print("Done!")
