"""matcalc_diagrams — Generate the matrix-calculus figures for the sparse AD post.

Draws chain-rule, matrix-free, forward/reverse-mode and sparsity/coloring
scenes as labeled matrix heatmaps.  Output goes to the post's image directory
(assets/img/2025-04-28-sparse-autodiff/) unless --output-dir is given.

Usage:
    python scripts/matcalc_diagrams --all                  # every figure, SVG
    python scripts/matcalc_diagrams --figure chainrule     # one figure
    python scripts/matcalc_diagrams --all --format pdf     # another format
    python scripts/matcalc_diagrams --list                 # list available

Requires: pip install numpy matplotlib jax colour
"""
