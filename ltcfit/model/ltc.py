# ltcfit/model/ltc.py

import numpy as np
from numba import jit

@jit(nopython=True)
def ltc_sample(M, u1, u2):
    """
    Draw directions from the clamped cosine distribution and push them through M.

    Args:
    M (np.ndarray): 3x3 transform of the lobe
    u1, u2 (np.ndarray): uniform [0, 1) values, one pair per direction

    Returns:
    np.ndarray: (n, 3) array of unit directions
    """
    n = u1.shape[0]
    directions = np.empty((n, 3))
    for k in range(n):
        theta = np.arccos(np.sqrt(u1[k]))
        phi = 2.0 * np.pi * u2[k]
        x = np.sin(theta) * np.cos(phi)
        y = np.sin(theta) * np.sin(phi)
        z = np.cos(theta)

        lx = M[0, 0] * x + M[0, 1] * y + M[0, 2] * z
        ly = M[1, 0] * x + M[1, 1] * y + M[1, 2] * z
        lz = M[2, 0] * x + M[2, 1] * y + M[2, 2] * z
        length = np.sqrt(lx * lx + ly * ly + lz * lz)

        directions[k, 0] = lx / length
        directions[k, 1] = ly / length
        directions[k, 2] = lz / length
    return directions

@jit(nopython=True)
def ltc_eval(M, inv_M, det_M, amplitude, L):
    """
    Evaluate the transformed cosine at each direction in L, scaled by amplitude.
    The value divided by amplitude is the density the lobe samples with.
    """
    n = L.shape[0]
    values = np.empty(n)
    for k in range(n):
        # back to the original cosine configuration
        ox = inv_M[0, 0] * L[k, 0] + inv_M[0, 1] * L[k, 1] + inv_M[0, 2] * L[k, 2]
        oy = inv_M[1, 0] * L[k, 0] + inv_M[1, 1] * L[k, 1] + inv_M[1, 2] * L[k, 2]
        oz = inv_M[2, 0] * L[k, 0] + inv_M[2, 1] * L[k, 1] + inv_M[2, 2] * L[k, 2]
        norm = np.sqrt(ox * ox + oy * oy + oz * oz)
        ox /= norm
        oy /= norm
        oz /= norm

        # change of variables
        tx = M[0, 0] * ox + M[0, 1] * oy + M[0, 2] * oz
        ty = M[1, 0] * ox + M[1, 1] * oy + M[1, 2] * oz
        tz = M[2, 0] * ox + M[2, 1] * oy + M[2, 2] * oz
        l = np.sqrt(tx * tx + ty * ty + tz * tz)
        jacobian = det_M / (l * l * l)

        D = max(0.0, oz) / np.pi
        values[k] = amplitude * D / jacobian
    return values

class LTC:
    """
    Linearly transformed cosine lobe.

    The transform is M = [X Y Z] @ [[m11, 0, m13], [0, m22, 0], [0, 0, 1]] where the
    columns X, Y, Z form an orthonormal frame with Z the principal axis of the lobe.
    update() must be called after changing the frame or the shape scalars.
    """
    def __init__(self):
        self.amplitude = 1.0

        # parametric representation
        self.m11 = 1.0
        self.m22 = 1.0
        self.m13 = 0.0
        self.X = np.array([1.0, 0.0, 0.0])
        self.Y = np.array([0.0, 1.0, 0.0])
        self.Z = np.array([0.0, 0.0, 1.0])

        self.update()

    @property
    def shape(self):
        """Shape scalars (m11, m22, m13)."""
        return np.array([self.m11, self.m22, self.m13])

    def set_frame(self, X, Y, Z):
        self.X = np.asarray(X, dtype=np.float64)
        self.Y = np.asarray(Y, dtype=np.float64)
        self.Z = np.asarray(Z, dtype=np.float64)

    def set_shape(self, m11, m22, m13):
        self.m11 = float(m11)
        self.m22 = float(m22)
        self.m13 = float(m13)

    def update(self):
        # matrix representation
        frame = np.column_stack((self.X, self.Y, self.Z))
        shape = np.array([[self.m11, 0.0, self.m13],
                          [0.0, self.m22, 0.0],
                          [0.0, 0.0, 1.0]])
        self.M = frame @ shape
        self.inv_M = np.linalg.inv(self.M)
        self.det_M = abs(np.linalg.det(self.M))

    def sample(self, u1, u2):
        return ltc_sample(self.M, np.ascontiguousarray(u1, dtype=np.float64),
                          np.ascontiguousarray(u2, dtype=np.float64))

    def eval(self, L):
        L = np.ascontiguousarray(np.atleast_2d(L), dtype=np.float64)
        return ltc_eval(self.M, self.inv_M, self.det_M, float(self.amplitude), L)
