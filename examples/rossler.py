"""
Rossler flow: record one trajectory and overlay its three projections.

"""

from __future__ import annotations

from dynstream import Rossler, create_sequence, plot
from dynstream.analysis import record

a, b, c = 0.2, 0.2, 5.7

with create_sequence(Rossler(a, b, c), (-1.0, 0.0, 0.0)) as seq:
    traj = record(seq, 100_000, Rossler.coords)

print(f"recorded {len(traj)} steps{' (diverged)' if traj.ended else ''}")
ax = plot.projections(traj, title=f"Rossler System: a={a} b={b} c={c}")
plot.savefig(ax, f"rossler_c{c}.pdf")
