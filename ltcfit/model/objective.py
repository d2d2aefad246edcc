# ltcfit/model/objective.py

from ltcfit.model.estimators import compute_error

class LTCObjective:
    """
    Error of an LTC lobe against a BRDF as a function of the shape scalars (m11, m22, m13).

    Every evaluation writes the candidate parameters into the shared lobe, so a single
    instance must not be evaluated concurrently.
    """
    def __init__(self, ltc, brdf, V, alpha, isotropic, n_samples, min_alpha):
        self.ltc = ltc
        self.brdf = brdf
        self.V = V
        self.alpha = alpha
        self.isotropic = isotropic
        self.n_samples = n_samples
        self.min_alpha = min_alpha

    def update(self, params):
        m11 = max(float(params[0]), self.min_alpha)
        m22 = max(float(params[1]), self.min_alpha)
        m13 = float(params[2])

        if self.isotropic:
            self.ltc.set_shape(m11, m11, 0.0)
        else:
            self.ltc.set_shape(m11, m22, m13)
        self.ltc.update()

    def __call__(self, params):
        self.update(params)
        return compute_error(self.ltc, self.brdf, self.V, self.alpha, self.n_samples)
