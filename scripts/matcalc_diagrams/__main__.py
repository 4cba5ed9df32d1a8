"""CLI entry point for matcalc_diagrams package.

Invoke as:  python scripts/matcalc_diagrams --figure chainrule
"""

# Bootstrap: when run as `python scripts/matcalc_diagrams` (directory path),
# re-execute through runpy so the package machinery resolves relative imports
# correctly and without DeprecationWarning.
if __name__ == "__main__" and not __package__:
    import os
    import runpy
    import sys

    _scripts_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    if _scripts_dir not in sys.path:
        sys.path.insert(0, _scripts_dir)
    runpy.run_module("matcalc_diagrams", run_name="__main__", alter_sys=True)
    raise SystemExit(0)  # unreachable — run_module already calls sys.exit()

import argparse
import sys

from ._common import default_output_dir, save
from .figures import (
    big_conv_jacobian,
    chainrule,
    forward_mode,
    forward_mode_naive,
    forward_mode_sparse,
    matrixfree,
    matrixfree2,
    reverse_mode,
    sparse_ad,
    sparse_map_colored,
    sparsity,
    sparsity_coloring,
    sparsity_pattern,
    sparsity_pattern_compressed,
)

FORMATS = ("svg", "pdf", "png")

# ---------------------------------------------------------------------------
# Figure registry
# ---------------------------------------------------------------------------

# name -> (function, keyword arguments, forced format or None)
FIGURES = {
    # Huge; vector formats would hold one path per cell
    "big_conv_jacobian": (big_conv_jacobian, {}, "png"),
    "chainrule": (chainrule, {"show_text": False}, None),
    "chainrule_num": (chainrule, {"show_text": True}, None),
    "matrixfree": (matrixfree, {}, None),
    "matrixfree2": (matrixfree2, {}, None),
    "forward_mode": (forward_mode, {}, None),
    "reverse_mode": (reverse_mode, {}, None),
    "sparse_matrix": (sparsity, {"ismap": False}, None),
    "sparse_map": (sparsity, {"ismap": True}, None),
    "sparse_ad": (sparse_ad, {}, None),
    "sparse_map_colored": (sparse_map_colored, {}, None),
    "sparsity_pattern": (sparsity_pattern, {}, None),
    "coloring": (sparsity_coloring, {}, None),
    "sparsity_pattern_compressed": (sparsity_pattern_compressed, {}, None),
    # These two must keep matching sizes
    "forward_mode_naive": (forward_mode_naive, {}, None),
    "forward_mode_sparse": (forward_mode_sparse, {}, None),
}


def match_figure(query):
    """Match a query like 'chainrule', 'chainrule.svg' or 'Chainrule' to a registry key."""
    q = query.strip().lower()

    if q in FIGURES:
        return q

    # Allow a file name with extension
    stem, _, ext = q.rpartition(".")
    if stem and ext in FORMATS and stem in FIGURES:
        return stem

    return None


def render(name, output_dir=None, fmt="svg"):
    """Build the registered figure ``name`` and save it.  Returns the file path."""
    if output_dir is None:
        output_dir = default_output_dir()
    func, kwargs, forced_fmt = FIGURES[name]
    fig = func(**kwargs)
    return save(fig, output_dir, name, forced_fmt or fmt)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate matrix-calculus figures for the sparse AD post."
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--figure",
        action="append",
        help="Figure to generate (repeatable, e.g. --figure chainrule)",
    )
    group.add_argument("--all", action="store_true", help="Generate all figures")
    group.add_argument("--list", action="store_true", help="List available figures")
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default="svg",
        help="Output format (default: svg; big_conv_jacobian is always png)",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help=(
            "Directory to write figures to (default: the post's image directory "
            "under the checkout, or under the working directory when installed)"
        ),
    )
    args = parser.parse_args(argv)

    if args.list:
        print("Available figures:")
        for name, (_, _, forced_fmt) in FIGURES.items():
            note = f"  ({forced_fmt} only)" if forced_fmt else ""
            print(f"  {name}{note}")
        print(f"\n{len(FIGURES)} figures total.")
        return 0

    if args.all:
        names = list(FIGURES)
    else:
        names = []
        for query in args.figure:
            name = match_figure(query)
            if name is None:
                print(f"No figure registered as '{query}'.")
                print("Use --list to see available figures.")
                return 1
            names.append(name)

    output_dir = args.output_dir or default_output_dir()
    print(f"{output_dir}/")
    for name in names:
        render(name, output_dir, args.format)

    print(f"\nGenerated {len(names)} figure(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
