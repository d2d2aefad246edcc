# ltcfit/model/export.py

import os
import numpy as np
from ltcfit.model.fitter import LTCTable

def save_ltc_table(path, table, tex1, tex2):
    """Save the fitted table, its packed textures and the fit diagnostics as a .npy dictionary."""
    lut_data = {
        'matrices': table.matrices,
        'amplitudes': table.amplitudes,
        'tex1': tex1,
        'tex2': tex2,
        'errors': table.errors,
        'iterations': table.iterations,
        'converged': table.converged,
        'spreads': table.spreads,
        'cos_theta': table.cos_theta,
        'roughness': table.roughness
    }
    np.save(path, lut_data)

def load_ltc_table(path):
    """Rebuild an LTCTable from a file written by save_ltc_table."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"LTC table not found at {path}")

    try:
        lut_data = np.load(path, allow_pickle=True).item()

        table = LTCTable(lut_data['matrices'].shape[0])
        table.matrices = lut_data['matrices'].astype(np.float64)
        table.amplitudes = lut_data['amplitudes'].astype(np.float64)
        table.errors = lut_data['errors']
        table.iterations = lut_data['iterations']
        table.converged = lut_data['converged']
        table.spreads = lut_data['spreads']

    except Exception as e:
        raise RuntimeError(f"Failed to load LTC table: {str(e)}")

    return table

def _format_floats(values):
    return ", ".join(f"{value:.6f}f" for value in values)

def write_tab_c(path, table):
    """
    Write the matrices and amplitudes as C arrays indexed by a + t * size.
    Matrix coefficients are written column by column.
    """
    size = table.size
    matrices = table.matrices.reshape(size * size, 3, 3)
    amplitudes = table.amplitudes.reshape(size * size, 2)

    with open(path, 'w') as f:
        f.write(f"static const int size = {size};\n\n")

        f.write("static const mat33 tabM[size*size] = {\n")
        for i, matrix in enumerate(matrices):
            separator = "," if i < len(matrices) - 1 else ""
            f.write(f"    {{{_format_floats(matrix.T.ravel())}}}{separator}\n")
        f.write("};\n\n")

        f.write("static const float tabAmplitude[size*size] = {\n")
        for i, amplitude in enumerate(amplitudes[:, 0]):
            separator = "," if i < len(amplitudes) - 1 else ""
            f.write(f"    {amplitude:.6f}f{separator}\n")
        f.write("};\n")

def write_js(path, tex1, tex2):
    """Write the packed textures as two JavaScript arrays of four floats per cell."""
    tex1 = tex1.reshape(-1, 4)
    tex2 = tex2.reshape(-1, 2)
    # The second texture is padded to RGBA
    tex2_rgba = np.zeros((len(tex2), 4))
    tex2_rgba[:, :2] = tex2

    with open(path, 'w') as f:
        for name, texture in (("g_ltc_1", tex1), ("g_ltc_2", tex2_rgba)):
            f.write(f"var {name} = [\n")
            f.write(",\n".join("    " + ", ".join(f"{value:.6f}" for value in row) for row in texture))
            f.write("\n];\n\n")
