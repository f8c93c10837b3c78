import numpy as np

from moeadra.foundation.problem.base import Problem


class DTLZ2Problem(Problem):
    def __init__(self, n_var: int = 12, n_obj: int = 3):
        self.n_var = n_var
        self.n_obj = n_obj
        self.xl = 0.0
        self.xu = 1.0

    def objectives(self, X: np.ndarray) -> np.ndarray:
        g = np.sum((X[:, self.n_obj - 1 :] - 0.5) ** 2, axis=1)
        F = np.ones((X.shape[0], self.n_obj))
        for i in range(self.n_obj):
            f = np.ones(X.shape[0])
            for j in range(self.n_obj - i - 1):
                f *= np.cos(X[:, j] * np.pi / 2.0)
            if i > 0:
                idx = self.n_obj - i - 1
                f *= np.sin(X[:, idx] * np.pi / 2.0)
            F[:, i] = f
        return (1.0 + g[:, None]) * F
