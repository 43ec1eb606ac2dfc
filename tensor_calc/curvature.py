"""
Curvature pipeline: Christoffel -> Riemann -> Ricci -> Ricci scalar -> Einstein.

Each stage is a plain function of (metric, coords). A stage that needs the
previous one recomputes it unless the caller hands it in; CurvatureCalculator
does that bookkeeping and caches every stage for one metric.
"""
import logging
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .errors import InvalidMetricError
from .metric_tensor import MetricTensor, invert
from .symbolic import ZERO, Add, Constant, Expression, Multiply, Subtract, parse
from .tensor import (ChristoffelResult, EinsteinResult, RicciResult, RiemannResult,
                     TensorComponent)

logger = logging.getLogger(__name__)


def _check_coords(metric: MetricTensor, coords: Sequence[str]) -> None:
    if len(coords) != metric.dimension:
        n = metric.dimension
        raise InvalidMetricError(f"Metric tensor must be {n}x{n} for {len(coords)} coordinates")


def _emit(components: list, indices: Tuple[int, ...], expr: Expression) -> None:
    simplified = expr.simplify()
    if not simplified.is_zero():
        components.append(TensorComponent.from_expression(indices, simplified))


def christoffel_symbols(metric: MetricTensor, coords: Sequence[str]) -> ChristoffelResult:
    """
    Christoffel symbols of the second kind,
    Γ^μ_{αβ} = 1/2 g^{μν} (∂_α g_{νβ} + ∂_β g_{να} - ∂_ν g_{αβ}).

    Components are stored with indices [μ, α, β].
    """
    _check_coords(metric, coords)
    n = metric.dimension
    g_inv = invert(metric)
    components = []
    for mu in range(n):
        for alpha in range(n):
            for beta in range(n):
                expr = ZERO
                for nu in range(n):
                    bracket = Subtract(
                        Add(metric[nu, beta].derivative(coords[alpha]),
                            metric[nu, alpha].derivative(coords[beta])),
                        metric[alpha, beta].derivative(coords[nu]),
                    )
                    expr = Add(expr, Multiply(g_inv[mu, nu], bracket))
                _emit(components, (mu, alpha, beta), Multiply(Constant(0.5), expr))
    logger.debug("Computed %d nonzero Christoffel symbols (n=%d)", len(components), n)
    return ChristoffelResult(components, n)


def riemann_tensor(metric: MetricTensor, coords: Sequence[str],
                   christoffel: Optional[ChristoffelResult] = None) -> RiemannResult:
    """
    Riemann tensor
    R^ρ_{σμν} = ∂_μ Γ^ρ_{σν} - ∂_ν Γ^ρ_{σμ} + Γ^ρ_{λμ} Γ^λ_{σν} - Γ^ρ_{λν} Γ^λ_{σμ}.
    """
    _check_coords(metric, coords)
    n = metric.dimension
    if christoffel is None:
        christoffel = christoffel_symbols(metric, coords)
    Gamma = christoffel.to_dense(n)
    components = []
    for rho in range(n):
        for sigma in range(n):
            for mu in range(n):
                for nu in range(n):
                    expr = Add(ZERO, Subtract(
                        Gamma[rho, sigma, nu].derivative(coords[mu]),
                        Gamma[rho, sigma, mu].derivative(coords[nu]),
                    ))
                    for lam in range(n):
                        expr = Add(expr, Subtract(
                            Multiply(Gamma[rho, lam, mu], Gamma[lam, sigma, nu]),
                            Multiply(Gamma[rho, lam, nu], Gamma[lam, sigma, mu]),
                        ))
                    _emit(components, (rho, sigma, mu, nu), expr)
    logger.debug("Computed %d nonzero Riemann components (n=%d)", len(components), n)
    return RiemannResult(components, n)


def ricci_tensor(metric: MetricTensor, coords: Sequence[str],
                 riemann: Optional[RiemannResult] = None) -> RicciResult:
    """
    Ricci tensor R_{μν} = R^ρ_{μρν}, contracting the first and third indices.
    """
    _check_coords(metric, coords)
    n = metric.dimension
    if riemann is None:
        riemann = riemann_tensor(metric, coords)
    R = riemann.to_dense(n)
    components = []
    for mu in range(n):
        for nu in range(n):
            expr = ZERO
            for rho in range(n):
                expr = Add(expr, R[rho, mu, rho, nu])
            _emit(components, (mu, nu), expr)
    logger.debug("Computed %d nonzero Ricci components (n=%d)", len(components), n)
    return RicciResult(components, n)


def ricci_scalar(metric: MetricTensor, coords: Sequence[str],
                 ricci: Optional[RicciResult] = None) -> TensorComponent:
    """
    Ricci scalar R = g^{μν} R_{μν}.

    Unlike the tensor stages this always returns a component (with empty
    indices), "0" included.
    """
    _check_coords(metric, coords)
    n = metric.dimension
    if ricci is None:
        ricci = ricci_tensor(metric, coords)
    Ric = ricci.to_dense(n)
    g_inv = invert(metric)
    expr = ZERO
    for mu in range(n):
        for nu in range(n):
            expr = Add(expr, Multiply(g_inv[mu, nu], Ric[mu, nu]))
    return TensorComponent.from_expression((), expr.simplify())


def einstein_tensor(metric: MetricTensor, coords: Sequence[str],
                    ricci: Optional[RicciResult] = None,
                    scalar: Optional[TensorComponent] = None) -> EinsteinResult:
    """
    Einstein tensor G_{μν} = R_{μν} - 1/2 g_{μν} R.

    The scalar is re-read from its text form, so it enters as an opaque
    token whenever the parser cannot recover its structure.
    """
    _check_coords(metric, coords)
    n = metric.dimension
    if ricci is None:
        ricci = ricci_tensor(metric, coords)
    if scalar is None:
        scalar = ricci_scalar(metric, coords)
    Ric = ricci.to_dense(n)
    R = parse(scalar.expression)
    components = []
    for mu in range(n):
        for nu in range(n):
            expr = Subtract(
                Ric[mu, nu],
                Multiply(Constant(0.5), Multiply(metric[mu, nu], R)),
            )
            _emit(components, (mu, nu), expr)
    logger.debug("Computed %d nonzero Einstein components (n=%d)", len(components), n)
    return EinsteinResult(components, n)


class CurvatureCalculator:
    """
    Runs the whole pipeline for one metric, computing each stage once.

    Attributes:
        metric: the MetricTensor g_{ij}.
        coords: coordinate names, one per metric row.
    """
    def __init__(self, metric: MetricTensor, coords: Sequence[str]):
        _check_coords(metric, coords)
        self.metric = metric
        self.coords = list(coords)
        self._cache: Dict[str, Any] = {}

    def clear_cache(self) -> None:
        """
        Clear all cached stages.
        """
        self._cache.clear()

    def get_cached(self, key: str, compute_fn: Callable[[], Any]) -> Any:
        """
        Retrieve a value from cache by key, or compute and cache it if missing.
        """
        if key not in self._cache:
            self._cache[key] = compute_fn()
        return self._cache[key]

    def christoffel_symbols(self) -> ChristoffelResult:
        return self.get_cached('Gamma', lambda: christoffel_symbols(self.metric, self.coords))

    def riemann_tensor(self) -> RiemannResult:
        return self.get_cached('Riemann', lambda: riemann_tensor(
            self.metric, self.coords, self.christoffel_symbols()))

    def ricci_tensor(self) -> RicciResult:
        return self.get_cached('Ricci', lambda: ricci_tensor(
            self.metric, self.coords, self.riemann_tensor()))

    def ricci_scalar(self) -> TensorComponent:
        return self.get_cached('Scalar', lambda: ricci_scalar(
            self.metric, self.coords, self.ricci_tensor()))

    def einstein_tensor(self) -> EinsteinResult:
        return self.get_cached('Einstein', lambda: einstein_tensor(
            self.metric, self.coords, self.ricci_tensor(), self.ricci_scalar()))

    def compute_all(self) -> Tuple[ChristoffelResult, RiemannResult, RicciResult,
                                   TensorComponent, EinsteinResult]:
        return (self.christoffel_symbols(), self.riemann_tensor(), self.ricci_tensor(),
                self.ricci_scalar(), self.einstein_tensor())

    def __repr__(self) -> str:
        return f"<CurvatureCalculator dim={self.metric.dimension} coords={self.coords}>"

# End of curvature.py
