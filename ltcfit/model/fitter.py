# ltcfit/model/fitter.py

'''
Fits an LTC lobe to a BRDF for every cell of a (roughness, cos(theta)) grid.

The grid is walked from rough to smooth and from normal incidence to grazing so that
each fit starts from the solution of a neighbouring cell.
'''

import numpy as np
from ltcfit.model.ltc import LTC
from ltcfit.model.estimators import compute_norm, compute_average_dir
from ltcfit.model.objective import LTCObjective
from ltcfit.model.optimizer import nelder_mead
from ltcfit.utilities.utils import conditional_print, conditional_tqdm, format_matrix

# Theta is clamped below pi/2 to stay away from the grazing singularity
MAX_THETA = 1.57

class LTCTable:
    """
    Fitted lobes for an N x N grid.

    Arrays are stored [t, a] so that flattening them gives the flat index a + t * N
    used by the exported tables. Use the (a, t) accessors to read cells.
    """
    def __init__(self, size):
        self.size = size
        self.matrices = np.zeros((size, size, 3, 3), dtype=np.float64)
        # amplitude and a reserved second field
        self.amplitudes = np.zeros((size, size, 2), dtype=np.float64)

        # Per-cell fit diagnostics
        self.errors = np.zeros((size, size), dtype=np.float64)
        self.iterations = np.zeros((size, size), dtype=np.int64)
        self.converged = np.zeros((size, size), dtype=bool)
        self.spreads = np.zeros((size, size), dtype=np.float64)

    @property
    def cos_theta(self):
        return np.arange(self.size) / (self.size - 1)

    @property
    def roughness(self):
        return np.arange(self.size) / (self.size - 1)

    def matrix(self, a, t):
        return self.matrices[t, a]

    def amplitude(self, a, t):
        return self.amplitudes[t, a, 0]

    def store(self, a, t, ltc, result):
        matrix = ltc.M.copy()
        # These coefficients are structurally zero for the transformed cosine
        matrix[0, 1] = 0.0
        matrix[1, 0] = 0.0
        matrix[1, 2] = 0.0
        matrix[2, 1] = 0.0

        self.matrices[t, a] = matrix
        self.amplitudes[t, a] = (ltc.amplitude, 0.0)
        self.errors[t, a] = result["value"]
        self.iterations[t, a] = result["iterations"]
        self.converged[t, a] = result["converged"]
        self.spreads[t, a] = result["spread"]

def traversal_order(size):
    """Yield (a, t) pairs with both indices descending, roughness in the outer loop."""
    for a in range(size - 1, -1, -1):
        for t in range(size - 1, -1, -1):
            yield a, t

def cell_parameters(a, t, size, min_alpha):
    """
    Map grid indices to the view direction and alpha of a cell.

    Returns:
    tuple: (V, alpha, theta)
    """
    # parameterised by cos(theta)
    ct = t / (size - 1)
    theta = min(MAX_THETA, float(np.arccos(ct)))
    V = np.array([np.sin(theta), 0.0, np.cos(theta)])

    # alpha = roughness^2
    roughness = a / (size - 1)
    alpha = max(roughness * roughness, min_alpha)
    return V, alpha, theta

def first_guess(ltc, a, t, size, average_dir, warm_start, table, min_alpha):
    """
    Initialise the frame and shape of the lobe before fitting cell (a, t).

    At normal incidence (t == size - 1) the lobe is rotationally symmetric and aligned
    with Z; it starts from (1, 1) for the roughest cell and from the same column of the
    previous roughness row otherwise. Elsewhere the lobe is oriented along the average
    direction of the BRDF and starts from warm_start, the shape fitted for the previous cell.

    Returns:
    bool: True when the cell is fitted with an isotropic lobe
    """
    if t == size - 1:
        ltc.set_frame((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))

        if a == size - 1:
            m11, m22 = 1.0, 1.0
        else:
            previous = table.matrix(a + 1, t)
            m11 = max(previous[0, 0], min_alpha)
            m22 = max(previous[1, 1], min_alpha)

        ltc.set_shape(m11, m22, 0.0)
        ltc.update()
        return True

    L = average_dir
    if not np.any(L):
        # A BRDF with no energy gives no direction to orient the lobe by
        L = np.array([0.0, 0.0, 1.0])
    ltc.set_frame((L[2], 0.0, -L[0]), (0.0, 1.0, 0.0), L)
    ltc.set_shape(*warm_start)
    ltc.update()
    return False

def fit(ltc, brdf, V, alpha, isotropic, config):
    """
    Refine the current shape of the lobe with the downhill simplex.
    The lobe is left holding the best parameters found.
    """
    objective = LTCObjective(ltc, brdf, V, alpha, isotropic, config.n_samples, config.min_alpha)
    result = nelder_mead(objective, ltc.shape, delta=config.epsilon,
                         tolerance=config.tolerance, max_iterations=config.max_iterations)

    # The optimizer may stop after evaluating a point other than the best one
    objective.update(result["point"])
    return result

def fit_cell(ltc, brdf, a, t, table, config, warm_start=None):
    """Fit cell (a, t), store it in the table and return the optimizer result."""
    size = table.size
    V, alpha, theta = cell_parameters(a, t, size, config.min_alpha)

    ltc.amplitude = compute_norm(brdf, V, alpha, config.n_samples)
    average_dir = compute_average_dir(brdf, V, alpha, config.n_samples)

    if warm_start is None:
        warm_start = ltc.shape
    isotropic = first_guess(ltc, a, t, size, average_dir, warm_start, table, config.min_alpha)

    result = fit(ltc, brdf, V, alpha, isotropic, config)
    table.store(a, t, ltc, result)

    if config.log_cells:
        conditional_print(config.silent_mode, f"a = {a}\t t = {t}\nalpha = {alpha}\t theta = {theta}")
        conditional_print(config.silent_mode, format_matrix(table.matrix(a, t)))
        conditional_print(config.silent_mode, f"error = {result['value']:.6g}\t iterations = {result['iterations']}\t spread = {result['spread']:.3e}\n")

    return result

def fit_table(brdf, config):
    """
    Fit every cell of a config.table_size x config.table_size grid in traversal order.
    One lobe instance is reused throughout; the shape fitted for each cell is passed
    explicitly as the warm start of the next one.
    """
    size = config.table_size
    table = LTCTable(size)
    ltc = LTC()

    warm_start = None
    for a, t in conditional_tqdm(traversal_order(size), config.silent_mode, total=size * size, desc='Fitting LTC'):
        fit_cell(ltc, brdf, a, t, table, config, warm_start=warm_start)
        warm_start = ltc.shape

    report_convergence(table, config)
    return table

def report_convergence(table, config):
    """Print a summary of the fit errors and of the cells that hit the iteration cap."""
    conditional_print(config.silent_mode, f"Mean fit error: {np.mean(table.errors):.6g} | Max fit error: {np.max(table.errors):.6g}")

    n_unconverged = int(np.count_nonzero(~table.converged))
    if n_unconverged > 0:
        worst_t, worst_a = np.unravel_index(np.argmax(table.spreads), table.spreads.shape)
        conditional_print(config.silent_mode,
                          f"{n_unconverged} of {table.size**2} cells reached the iteration cap ({config.max_iterations}). "
                          f"Worst final simplex spread: {table.spreads[worst_t, worst_a]:.3e} at a = {worst_a}, t = {worst_t}")
