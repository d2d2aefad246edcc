# utils.py

import numpy as np
from numba import jit
from tqdm import tqdm

def conditional_print(silent_mode, message):
    if not silent_mode:
        print(message)

def conditional_tqdm(iterable, silent_mode, **kwargs):
    if silent_mode:
        return iterable
    else:
        return tqdm(iterable, **kwargs)

@jit(nopython=True)
def normalize_vector(v):
    """Normalize a vector."""
    norm = np.sqrt(np.sum(v**2))
    return v / norm if norm != 0 else v

def format_matrix(matrix, precision=6):
    """Render a 3x3 matrix as three tab separated rows for console output."""
    return "\n".join("\t ".join(f"{value:.{precision}g}" for value in row) for row in matrix)
