# src/dynstream/cli.py
"""Command-line front-end: ``dynstream {logistic,duffing,rossler} ...``."""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

from dynstream.analysis import (
    bifurcation,
    classify,
    compare,
    diagram,
    discard,
    first_converged,
    logistic_attractor,
    lyapunov,
    record,
    record_pair,
)
from dynstream.config import ExplorerConfig, load_config
from dynstream.errors import ConfigError, DynstreamError, GridIndexError, OutOfDomainError
from dynstream.kernels import Duffing, LogisticMap, Rossler
from dynstream.runtime import Axis, ParameterGrid, create_sequence

__all__ = ["main", "build_parser"]

logger = logging.getLogger("dynstream.cli")


# ---------------------------------------------------------------------------
# Rendering (kept apart from the numerics; skipped with --no-plot)
# ---------------------------------------------------------------------------

def _render(args, draw, filename: str) -> Path | None:
    if args.no_plot:
        return None
    import matplotlib

    matplotlib.use("Agg")
    from dynstream import plot

    t0 = time.perf_counter()
    ax = draw(plot)
    path = plot.savefig(ax, Path(args.output) / filename)
    plot.export.close(ax)
    logger.info("Time spent on plotting: %.3fs", time.perf_counter() - t0)
    print(f"wrote {path}")
    return path


# ---------------------------------------------------------------------------
# logistic
# ---------------------------------------------------------------------------

def _logistic_grid(cfg, *, column_only: bool = False) -> ParameterGrid:
    r_axis = Axis.from_range("r", cfg.r_start, cfg.r_stop, cfg.r_step)
    x0_axis = Axis.from_range("x0", cfg.x0_start, cfg.x0_stop, cfg.x0_step)
    if column_only:
        if not 0 <= cfg.x0_index < x0_axis.length:
            raise GridIndexError("x0 column", cfg.x0_index, cfg.x0_index, x0_axis.length)
        # Scans down one x0 column need no other cells.
        x0_axis = Axis.single("x0", x0_axis.value(cfg.x0_index))
    # Lazy: analyses walk the grid cell by cell or column by column.
    return ParameterGrid.from_axes(r_axis, x0_axis, LogisticMap, eager=False)


def _cmd_logistic(args, config: ExplorerConfig) -> int:
    cfg = config.logistic
    ran = False

    if args.convergence:
        ran = True
        targets = logistic_attractor(cfg.r)
        with create_sequence(LogisticMap(cfg.r), (cfg.x0,)) as seq:
            if targets is None:
                print(f"r={cfg.r:g}: no closed-form attractor; raw values after {cfg.transient} steps")
                discard(seq, cfg.transient)
            else:
                hit = first_converged(seq, targets, tol=1e-3, max_steps=cfg.transient)
                if hit is not None:
                    print(
                        f"Convergence to Xn {hit.value} with accuracy {hit.difference} "
                        f"after {hit.iteration} iterations."
                    )
                discard(seq, cfg.transient - seq.consumed)
            for sample in classify(seq, targets, args.count):
                print(f"r={cfg.r:g} x0={cfg.x0:g} {sample.format()}")

    if args.chaos:
        ran = True
        x0b = cfg.x0 + cfg.x0_step
        if x0b > 1.0:
            raise OutOfDomainError(
                "x0", cfg.x0, f"x0 <= {1.0 - cfg.x0_step:g} so its neighbour x0+{cfg.x0_step:g} stays in [0, 1]"
            )
        kernel = LogisticMap(cfg.r)
        with create_sequence(kernel, (cfg.x0,)) as a, create_sequence(kernel, (x0b,)) as b:
            for sample in compare(a, b, args.count):
                print(f"r={cfg.r:g} {sample.format()}")

    if args.bifurcation:
        ran = True
        with _logistic_grid(cfg, column_only=True) as grid:
            res = bifurcation.detect_on_grid(grid, 0)
        for label in ("1->2", "2->4", "4->8"):
            r = res.get(label)
            print(f"bifurcation {label}: " + ("not found" if r is None else f"r={r:.3f}"))

    if args.liapunov:
        ran = True
        t0 = time.perf_counter()
        with _logistic_grid(cfg, column_only=True) as grid:
            curve = lyapunov.curve_on_grid(grid, 0, cfg.n, transient=cfg.transient)
        logger.info("Time spent on calculation: %.3fs", time.perf_counter() - t0)
        crossings = curve.zero_crossings()
        if crossings.size:
            print(f"Liapunov exponent first positive at r={crossings[0]:.3f}")
        _render(args, lambda plot: plot.curve(curve), "liapunov.pdf")

    if args.diagram or not ran:
        t0 = time.perf_counter()
        with _logistic_grid(cfg) as grid:
            result = diagram.sample(grid, cfg.transient, release=True)
        logger.info("Time spent on calculation: %.3fs", time.perf_counter() - t0)
        print(f"diagram: {len(result.finite())} points")
        _render(args, lambda plot: plot.diagram(result), "fullRange_feigenbaum.pdf")
    return 0


# ---------------------------------------------------------------------------
# duffing / rossler
# ---------------------------------------------------------------------------

def _cmd_duffing(args, config: ExplorerConfig) -> int:
    cfg = config.duffing
    names = Duffing.coords
    if args.compare:
        f_low, f_high = cfg.compare_F
        with create_sequence(Duffing(f_low, cfg.dt), (cfg.x0, cfg.y0)) as low, \
                create_sequence(Duffing(f_high, cfg.dt), (cfg.x0, cfg.y0)) as high:
            trajs = record_pair(low, high, cfg.nsteps, names)
        print(f"recorded {len(trajs[0])} steps for F={f_low:g} and F={f_high:g}")
        _render(
            args,
            lambda plot: plot.phase(
                trajs,
                labels=[f"F={f_low:g}", f"F={f_high:g}"],
                xlabel="X",
                ylabel="Y=dx/dt",
                title=f"Poincare Section F={f_low:g} vs F={f_high:g}",
            ),
            "iduff_comp.pdf",
        )
        return 0

    with create_sequence(Duffing(cfg.F, cfg.dt), (cfg.x0, cfg.y0)) as seq:
        traj = record(seq, cfg.nsteps, names)
    print(f"recorded {len(traj)} of {cfg.nsteps} steps for F={cfg.F:g}")
    _render(
        args,
        lambda plot: plot.phase(traj, xlabel="X", ylabel="Y=dx/dt", title=f"Poincare Section F={cfg.F:g}"),
        f"iduff_F{cfg.F:g}.pdf",
    )
    return 0


def _cmd_rossler(args, config: ExplorerConfig) -> int:
    cfg = config.rossler
    kernel = Rossler(cfg.a, cfg.b, cfg.c)
    with create_sequence(kernel, (cfg.x0, cfg.y0, cfg.z0)) as seq:
        traj = record(seq, cfg.t, Rossler.coords)
    status = "diverged" if traj.ended else "ok"
    print(f"recorded {len(traj)} of {cfg.t} steps ({status})")
    title = (
        f"Rossler System:\n a={cfg.a:g} b={cfg.b:g} c={cfg.c:g}\n"
        f" x0={cfg.x0:g} y0={cfg.y0:g} z0={cfg.z0:g}"
    )
    _render(args, lambda plot: plot.projections(traj, title=title), f"rossler_c{cfg.c:g}.pdf")
    return 0


# ---------------------------------------------------------------------------
# parser / entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dynstream", description="Explore logistic, Duffing and Rossler dynamics.")
    parser.add_argument("--config", help="TOML config file")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: WARNING)")
    parser.add_argument("--output", default=".", help="directory for rendered PDFs")
    parser.add_argument("--no-plot", action="store_true", help="skip rendering")
    sub = parser.add_subparsers(dest="system", required=True)

    p = sub.add_parser("logistic", help="logistic map over an (r, x0) grid")
    p.add_argument("--r", type=float)
    p.add_argument("--x0", type=float)
    p.add_argument("--r-start", dest="r_start", type=float)
    p.add_argument("--r-stop", dest="r_stop", type=float)
    p.add_argument("--r-step", dest="r_step", type=float)
    p.add_argument("--x0-step", dest="x0_step", type=float)
    p.add_argument("--x0-index", dest="x0_index", type=int)
    p.add_argument("--transient", type=int)
    p.add_argument("-n", type=int, help="samples per Liapunov exponent")
    p.add_argument("--count", type=int, default=30, help="lines printed by --convergence/--chaos")
    p.add_argument("--diagram", action="store_true", help="Feigenbaum diagram")
    p.add_argument("--liapunov", action="store_true", help="Liapunov exponent curve")
    p.add_argument("--bifurcation", action="store_true", help="period-doubling points")
    p.add_argument("--convergence", action="store_true", help="print convergence to the attractor")
    p.add_argument("--chaos", action="store_true", help="print divergence of neighbouring x0")
    p.set_defaults(func=_cmd_logistic, section="logistic")

    p = sub.add_parser("duffing", help="forced Duffing oscillator")
    p.add_argument("--F", dest="F", type=float)
    p.add_argument("--x0", type=float)
    p.add_argument("--y0", type=float)
    p.add_argument("-t", dest="t", type=int, help="seconds")
    p.add_argument("--dt", dest="steps_per_second", type=int, help="steps per second")
    p.add_argument("--compare", action="store_true", help="compare F=0.24 and F=0.35")
    p.set_defaults(func=_cmd_duffing, section="duffing")

    p = sub.add_parser("rossler", help="Rossler flow")
    for name in ("a", "b", "c", "x0", "y0", "z0"):
        p.add_argument(f"--{name}", type=float)
    p.add_argument("-t", dest="t", type=int, help="number of steps")
    p.set_defaults(func=_cmd_rossler, section="rossler")
    return parser


_SECTION_KEYS = {
    "logistic": ("r", "x0", "r_start", "r_stop", "r_step", "x0_step", "x0_index", "transient", "n"),
    "duffing": ("F", "x0", "y0", "t", "steps_per_second"),
    "rossler": ("a", "b", "c", "x0", "y0", "z0", "t"),
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        config = load_config(args.config) if args.config else ExplorerConfig()
        overrides = {k: getattr(args, k) for k in _SECTION_KEYS[args.section]}
        config = config.replace(args.section, **overrides).validate()
        return args.func(args, config)
    except OutOfDomainError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ConfigError as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return 2
    except DynstreamError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
