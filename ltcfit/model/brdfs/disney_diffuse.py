import numpy as np
from .base_brdf import Brdf

class BrdfDisneyDiffuse(Brdf):
    """Disney (Burley) diffuse lobe, sampled from the cosine-weighted hemisphere."""
    def __init__(self):
        super().__init__("disney_diffuse")

    def eval(self, V, L, alpha):
        if V[2] <= 0:
            return self._below_horizon(L)

        NdotL = L[:, 2]
        NdotV = V[2]
        above = NdotL > 0

        H = V[np.newaxis, :] + L
        with np.errstate(divide='ignore', invalid='ignore'):
            H /= np.linalg.norm(H, axis=1, keepdims=True)
        LdotH = np.sum(L * H, axis=1)

        # Fresnel-like retro-reflection, driven by perceptual roughness
        fd90 = 0.5 + 2.0 * LdotH * LdotH * np.sqrt(alpha)
        light_scatter = 1.0 + (fd90 - 1.0) * (1.0 - np.clip(NdotL, 0.0, 1.0))**5
        view_scatter = 1.0 + (fd90 - 1.0) * (1.0 - NdotV)**5

        values = np.where(above, light_scatter * view_scatter * NdotL / np.pi, 0.0)
        pdfs = np.where(above, NdotL / np.pi, 0.0)
        return self._finite(values, pdfs)

    def sample(self, V, alpha, u1, u2):
        r = np.sqrt(u1)
        phi = 2.0 * np.pi * u2
        return np.stack((r * np.cos(phi), r * np.sin(phi), np.sqrt(1.0 - r * r)), axis=1)
