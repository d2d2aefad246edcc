# ltcfit/model/optimizer.py

import numpy as np
from scipy.optimize import minimize

# Keeps the relative spread finite when the simplex values reach zero
TINY = 1e-10

def simplex_spread(values):
    """Relative spread 2|f_hi - f_lo| / (|f_hi| + |f_lo|) of the objective values of a simplex."""
    lo = float(np.min(values))
    hi = float(np.max(values))
    return 2.0 * abs(hi - lo) / (abs(hi) + abs(lo) + TINY)

def nelder_mead(objective, start, delta=0.05, tolerance=1e-5, max_iterations=100):
    """
    Downhill simplex minimisation starting from the simplex {start, start + delta * e_i}.

    Stops when the relative spread of the simplex values drops to tolerance or after
    max_iterations. scipy only offers an absolute bound on the spread, so each run is
    given the bound matching tolerance at the current simplex values and is restarted
    from its final simplex until the relative test holds. Non-convergence is not an
    error: the best point found is returned with converged set to False.

    Returns:
    dict: point, value, iterations, converged and the final simplex spread
    """
    start = np.asarray(start, dtype=np.float64)
    simplex = np.vstack([start, start + delta * np.eye(len(start))])
    values = np.array([objective(vertex) for vertex in simplex], dtype=np.float64)

    iterations = 0
    while simplex_spread(values) > tolerance and iterations < max_iterations:
        # |f_hi - f_lo| <= bound is the same test as simplex_spread(values) <= tolerance
        bound = 0.5 * tolerance * (abs(np.min(values)) + abs(np.max(values)) + TINY)

        # Only the spread of objective values decides convergence
        result = minimize(objective, simplex[np.argmin(values)], method='Nelder-Mead',
                          options={'initial_simplex': simplex,
                                   'maxiter': max_iterations - iterations,
                                   'xatol': np.inf,
                                   'fatol': bound})

        iterations += int(result.nit)
        simplex, values = result.final_simplex
        if result.nit == 0:
            break

    best = int(np.argmin(values))
    spread = simplex_spread(values)
    return {
        "point": np.array(simplex[best], dtype=np.float64),
        "value": float(values[best]),
        "iterations": iterations,
        "converged": bool(spread <= tolerance),
        "spread": spread
    }
