# Base class for BRDF models

import numpy as np

class Brdf:
    """
    Capability consumed by the fitter: importance sampling of outgoing directions and
    evaluation of the cosine-weighted BRDF together with the density of that same
    sampling distribution.

    Directions are unit vectors in the local shading frame with the normal along +Z.
    alpha is roughness squared.
    """
    def __init__(self, name):
        self.name = name

    def sample(self, V, alpha, u1, u2):
        """Map arrays of uniform [0, 1) pairs to an (n, 3) array of outgoing directions."""
        raise NotImplementedError("Subclasses must implement sample")

    def eval(self, V, L, alpha):
        """Return (values, pdfs) for an (n, 3) array of outgoing directions L."""
        raise NotImplementedError("Subclasses must implement eval")

    @staticmethod
    def _below_horizon(L):
        n = len(L)
        return np.zeros(n), np.zeros(n)

    @staticmethod
    def _reflect(V, N):
        # Mirror V about each microfacet normal in N
        return -V[np.newaxis, :] + 2.0 * N * (N @ V)[:, np.newaxis]

    @staticmethod
    def _finite(values, pdfs):
        # Directions grazing the horizon can produce 0/0 in the microfacet terms
        bad = ~(np.isfinite(values) & np.isfinite(pdfs))
        values[bad] = 0.0
        pdfs[bad] = 0.0
        return values, pdfs
