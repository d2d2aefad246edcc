import pytest
import numpy as np
from ltcfit.model.fitter import LTCTable
from ltcfit.model.packing import pack_table
from ltcfit.model.export import save_ltc_table, load_ltc_table, write_tab_c, write_js

def _filled_table(size=2):
    table = LTCTable(size)
    for t in range(size):
        for a in range(size):
            table.matrices[t, a] = np.array([[0.5 + a, 0.0, 0.1 * t],
                                             [0.0, 0.7 + a, 0.0],
                                             [-0.2, 0.0, 1.0]])
            table.amplitudes[t, a, 0] = 0.9 - 0.1 * (a + t)
    table.errors[:] = 1e-3
    table.iterations[:] = 42
    table.converged[0, 0] = True
    return table

def test_saved_table_can_be_loaded(tmp_path):
    table = _filled_table()
    tex1, tex2 = pack_table(table)
    path = tmp_path / "ltc_test.npy"

    save_ltc_table(path, table, tex1, tex2)
    loaded = load_ltc_table(path)

    assert loaded.size == 2
    assert np.allclose(loaded.matrices, table.matrices)
    assert np.allclose(loaded.amplitudes, table.amplitudes)
    assert np.all(loaded.iterations == 42)
    assert loaded.converged[0, 0] and not loaded.converged[1, 1]

    lut_data = np.load(path, allow_pickle=True).item()
    assert np.allclose(lut_data['tex1'], tex1)
    assert np.allclose(lut_data['cos_theta'], [0.0, 1.0])

def test_missing_table_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_ltc_table(tmp_path / "missing.npy")

def test_malformed_table_raises(tmp_path):
    path = tmp_path / "malformed.npy"
    np.save(path, np.zeros(4))

    with pytest.raises(RuntimeError, match="Failed to load LTC table"):
        load_ltc_table(path)

def test_c_table_layout(tmp_path):
    table = _filled_table()
    path = tmp_path / "ltc.inc"

    write_tab_c(path, table)
    lines = path.read_text().splitlines()

    assert lines[0] == "static const int size = 2;"
    start = lines.index("static const mat33 tabM[size*size] = {")
    matrix_lines = lines[start + 1:start + 5]
    # flat index a + t * size, coefficients column by column
    assert matrix_lines[1].strip() == "{1.500000f, 0.000000f, -0.200000f, 0.000000f, 1.700000f, 0.000000f, 0.000000f, 0.000000f, 1.000000f},"
    assert lines[start + 5] == "};"
    assert "static const float tabAmplitude[size*size] = {" in lines

def test_js_textures(tmp_path):
    table = _filled_table()
    tex1, tex2 = pack_table(table)
    path = tmp_path / "ltc.js"

    write_js(path, tex1, tex2)
    text = path.read_text()

    assert "var g_ltc_1 = [" in text
    assert "var g_ltc_2 = [" in text
    g_ltc_2 = text.split("var g_ltc_2 = [")[1].split("];")[0].strip().splitlines()
    assert len(g_ltc_2) == 4
    assert all(len(row.rstrip(",").split(",")) == 4 for row in g_ltc_2)

if __name__ == '__main__':
    pytest.main([__file__])
