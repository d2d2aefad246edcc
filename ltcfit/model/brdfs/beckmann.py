import numpy as np
from .base_brdf import Brdf

class BrdfBeckmann(Brdf):
    """Beckmann microfacet BRDF using the rational approximation of the Smith Lambda function."""
    def __init__(self):
        super().__init__("beckmann")

    def eval(self, V, L, alpha):
        if V[2] <= 0:
            return self._below_horizon(L)

        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            lambda_V = self._lambda(V[2], alpha)
            lambda_L = self._lambda(L[:, 2], alpha)
            G2 = np.where(L[:, 2] > 0, 1.0 / (1.0 + lambda_V + lambda_L), 0.0)

            H = V[np.newaxis, :] + L
            H /= np.linalg.norm(H, axis=1, keepdims=True)
            slope_x = H[:, 0] / H[:, 2]
            slope_y = H[:, 1] / H[:, 2]
            D = np.exp(-(slope_x**2 + slope_y**2) / (alpha * alpha))
            D = D / (np.pi * alpha * alpha * H[:, 2]**4)

            pdfs = np.abs(D * H[:, 2] / 4.0 / (H @ V))
            values = D * G2 / 4.0 / V[2]

        return self._finite(values, pdfs)

    def sample(self, V, alpha, u1, u2):
        phi = 2.0 * np.pi * u1
        r = np.sqrt(-alpha * alpha * np.log(1.0 - u2))
        N = np.stack((r * np.cos(phi), r * np.sin(phi), np.ones_like(r)), axis=1)
        N /= np.linalg.norm(N, axis=1, keepdims=True)
        return self._reflect(V, N)

    @staticmethod
    def _lambda(cos_theta, alpha):
        cos_theta = np.clip(cos_theta, -1.0, 1.0)
        a = 1.0 / alpha / np.tan(np.arccos(cos_theta))
        rational = (1.0 - 1.259 * a + 0.396 * a * a) / (3.535 * a + 2.181 * a * a)
        return np.where((cos_theta < 1.0) & (a < 1.6), rational, 0.0)
