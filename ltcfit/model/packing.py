# ltcfit/model/packing.py

import numpy as np

def pack_matrices(matrices, amplitudes):
    """
    Pack LTC matrices into the two texture records used at runtime.

    Only the five structurally non-zero coefficients are read:
        a 0 d              c*e      0      -c*d
        0 c 0   inverse     0    a*e - b*d   0      (scaled by the determinant)
        b 0 e   ==>       -b*c      0       a*c

    Args:
    matrices (np.ndarray): (..., 3, 3) LTC matrices
    amplitudes (np.ndarray): (..., 2) amplitude records, amplitude first

    Returns:
    tuple: (tex1, tex2) with shapes (..., 4) and (..., 2)
    """
    a = matrices[..., 0, 0]
    b = matrices[..., 2, 0]
    c = matrices[..., 1, 1]
    d = matrices[..., 0, 2]
    e = matrices[..., 2, 2]

    tex1 = np.stack((c * e, -b * c, a * e - b * d, -c * d), axis=-1)
    tex2 = np.stack((a * c, amplitudes[..., 0]), axis=-1)
    return tex1, tex2

def pack_table(table):
    """Pack every cell of an LTCTable, keeping its [t, a] layout."""
    return pack_matrices(table.matrices, table.amplitudes)

def rescaled_inverse(tex1, tex2):
    """
    Rebuild the inverse matrix, scaled by the determinant of the original one,
    from a single packed cell.
    """
    t0, t1, t2, t3 = tex1
    t4 = tex2[0]
    return np.array([[t0, 0.0, t3],
                     [0.0, t2, 0.0],
                     [t1, 0.0, t4]])
