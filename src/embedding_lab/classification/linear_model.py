"""
One-vs-rest logistic regression trained with batch gradient descent.

One binary logistic model per class, all fitted together as a single
(n_features, n_classes) weight matrix plus a bias row. Weights start at
zero, so a fit on the same data is fully deterministic.

The decision score for class k is the raw margin x @ W[:, k] + b[k].
Margins are NOT probabilities and are not calibrated across classes.
"""

from __future__ import annotations

import numpy as np

NUM_STEPS = 1000
LEARNING_RATE = 0.01


def _sigmoid(z: np.ndarray) -> np.ndarray:
    # Clip keeps exp() finite for large margins
    return 1.0 / (1.0 + np.exp(-np.clip(z, -500, 500)))


class OneVsRestLogisticRegression:
    """
    Multi-class linear classifier (satisfies LinearClassifier).

    Args:
        num_classes: Number of output classes. Defaults to max(y) + 1 at fit time.
        num_steps: Gradient descent iterations
        learning_rate: Step size
    """

    def __init__(
        self,
        num_classes: int | None = None,
        num_steps: int = NUM_STEPS,
        learning_rate: float = LEARNING_RATE,
    ):
        self.num_classes = num_classes
        self.num_steps = num_steps
        self.learning_rate = learning_rate
        self.weights: np.ndarray | None = None
        self.bias: np.ndarray | None = None

    @property
    def n_features(self) -> int | None:
        return None if self.weights is None else self.weights.shape[0]

    def fit(self, X: np.ndarray, y: np.ndarray) -> "OneVsRestLogisticRegression":
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.int64).ravel()

        if X.ndim != 2:
            raise ValueError(f"X must be 2-dimensional, got shape {X.shape}")
        if X.shape[0] != y.shape[0]:
            raise ValueError(f"X has {X.shape[0]} rows but y has {y.shape[0]} labels")
        if X.shape[0] == 0:
            raise ValueError("Cannot fit on an empty training set")

        n_samples, n_features = X.shape
        n_classes = self.num_classes or int(y.max()) + 1

        # One-hot targets: column k is the binary problem "class k vs rest"
        targets = np.zeros((n_samples, n_classes))
        targets[np.arange(n_samples), y] = 1.0

        weights = np.zeros((n_features, n_classes))
        bias = np.zeros(n_classes)

        for _ in range(self.num_steps):
            predictions = _sigmoid(X @ weights + bias)
            error = predictions - targets
            weights -= self.learning_rate * (X.T @ error) / n_samples
            bias -= self.learning_rate * error.mean(axis=0)

        self.weights = weights
        self.bias = bias
        return self

    def decision_scores(self, X: np.ndarray) -> np.ndarray:
        if self.weights is None or self.bias is None:
            raise RuntimeError("OneVsRestLogisticRegression is not fitted")
        X = np.atleast_2d(np.asarray(X, dtype=np.float64))
        return X @ self.weights + self.bias

    def predict_index(self, X: np.ndarray) -> np.ndarray:
        return np.argmax(self.decision_scores(X), axis=1)
