# ltcfit/model/estimators.py

import numpy as np
from ltcfit.utilities.utils import normalize_vector

def sample_grid(n_samples):
    """
    Stratified grid of sample pairs, U1 = (i + 0.5) / n and U2 = (j + 0.5) / n.

    Args:
    n_samples (int): Number of samples along each axis

    Returns:
    tuple: (u1, u2) flat arrays of length n_samples**2
    """
    centres = (np.arange(n_samples) + 0.5) / n_samples
    u2, u1 = np.meshgrid(centres, centres, indexing='ij')
    return u1.ravel(), u2.ravel()

def _brdf_weights(brdf, V, alpha, n_samples):
    u1, u2 = sample_grid(n_samples)
    L = brdf.sample(V, alpha, u1, u2)
    values, pdfs = brdf.eval(V, L, alpha)
    # Samples with no density contribute nothing
    weights = np.divide(values, pdfs, out=np.zeros_like(values), where=pdfs > 0)
    return L, weights

def compute_norm(brdf, V, alpha, n_samples):
    """Estimate the albedo of the BRDF for view direction V."""
    _, weights = _brdf_weights(brdf, V, alpha, n_samples)
    return float(np.sum(weights) / (n_samples * n_samples))

def compute_average_dir(brdf, V, alpha, n_samples):
    """
    Estimate the average outgoing direction of the BRDF.
    The lateral (y) component is cleared, it should vanish for isotropic BRDFs.
    """
    L, weights = _brdf_weights(brdf, V, alpha, n_samples)
    average_dir = np.sum(weights[:, np.newaxis] * L, axis=0)
    average_dir[1] = 0.0
    return normalize_vector(average_dir)

def _mis_error(ltc, brdf, V, alpha, L):
    eval_brdf, pdf_brdf = brdf.eval(V, L, alpha)
    eval_ltc = ltc.eval(L)
    if ltc.amplitude > 0:
        pdf_ltc = eval_ltc / ltc.amplitude
    else:
        pdf_ltc = np.zeros_like(eval_ltc)

    # Balance heuristic weight with a cubed difference
    error = np.abs(eval_brdf - eval_ltc).astype(np.float64)**3
    pdf_sum = pdf_ltc + pdf_brdf
    return np.divide(error, pdf_sum, out=np.zeros_like(error), where=pdf_sum > 0)

def compute_error(ltc, brdf, V, alpha, n_samples):
    """
    Multiple importance sampling estimate of the error between the LTC and the BRDF.
    Samples are drawn from both distributions over the same stratified grid.

    Returns:
    float: single precision error
    """
    u1, u2 = sample_grid(n_samples)

    # importance sample LTC
    error = np.sum(_mis_error(ltc, brdf, V, alpha, ltc.sample(u1, u2)), dtype=np.float64)
    # importance sample BRDF
    error += np.sum(_mis_error(ltc, brdf, V, alpha, brdf.sample(V, alpha, u1, u2)), dtype=np.float64)

    return float(np.float32(error / (n_samples * n_samples)))
