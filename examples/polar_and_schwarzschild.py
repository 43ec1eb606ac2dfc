"""
Demo script for tensor_calc.
Covers: metric parsing, the symbolic inverse, the curvature pipeline,
the exact-solution catalog, LaTeX export and component plots.
"""
import os

import matplotlib.pyplot as plt

from tensor_calc import (CurvatureCalculator, LaTeXExporter, invert, parse_metric,
                         solve_vacuum_einstein_equations)
from tensor_calc.visualization import ComponentPlotter


def save_matplotlib_figure(fig, filename):
    """Helper function to save matplotlib figures and show them."""
    plt.show()
    fig.savefig(filename, bbox_inches='tight', dpi=300)
    plt.close(fig)


def main():
    os.makedirs("figures", exist_ok=True)

    print("\n1. Polar plane")
    print("----------------------------------------")
    coords = ["r", "theta"]
    metric = parse_metric([["1", "0"], ["0", "r^2"]], coords)
    print("g       =", metric.to_strings())
    print("g^-1    =", invert(metric).to_strings())

    calc = CurvatureCalculator(metric, coords)
    for component in calc.christoffel_symbols():
        print(f"Gamma{list(component.indices)} = {component.expression}")
    print("R       =", calc.ricci_scalar().expression)

    print("\n2. LaTeX export")
    print("----------------------------------------")
    LaTeXExporter.metric(metric, os.path.join("figures", "polar_metric.tex"))
    LaTeXExporter.christoffel(calc.christoffel_symbols(), os.path.join("figures", "polar_christoffel.tex"))
    print("Wrote figures/polar_metric.tex and figures/polar_christoffel.tex")

    print("\n3. Component plots")
    print("----------------------------------------")
    plotter = ComponentPlotter("r", (0.5, 3.0))
    ax = plotter.plot_result(calc.christoffel_symbols())
    save_matplotlib_figure(ax.figure, os.path.join("figures", "polar_christoffel.png"))

    print("\n4. Schwarzschild from the solution catalog")
    print("----------------------------------------")
    spacetime = ["t", "r", "theta", "phi"]
    schwarzschild = solve_vacuum_einstein_equations(spacetime, "spherical")[0]
    for row in schwarzschild.metric.to_strings():
        print("  ", row)

    plotter = ComponentPlotter("r", (2.5, 10.0), fixed={"M": 1.0, "theta": 1.0})
    ax = plotter.plot_metric(schwarzschild.metric)
    save_matplotlib_figure(ax.figure, os.path.join("figures", "schwarzschild_metric.png"))

    # 4x4 inverse is an identity placeholder, so this scalar is not the physical 0.
    calc = CurvatureCalculator(schwarzschild.metric, spacetime)
    print("R (placeholder inverse) =", calc.ricci_scalar().expression)


if __name__ == "__main__":
    main()
