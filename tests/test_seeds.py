"""Tests for the convenience wrappers."""
import numpy as np
import pytest

from dagdiff.ad import value, grad, derivative, check_gradient, matrix, matmul, msum, mult


def test_value_and_grad(gaussian_bump):
    env = {"x1": 2.0, "x2": 0.5}
    assert value(gaussian_bump, env) == pytest.approx(0.2389, abs=1e-3)
    g = grad(gaussian_bump, env)
    assert g["x1"] == pytest.approx(derivative(gaussian_bump, "x1", env))
    assert g["x2"] == pytest.approx(derivative(gaussian_bump, "x2", env))


def test_check_gradient_scalar(gaussian_bump):
    errors = check_gradient(gaussian_bump, {"x1": 2.0, "x2": 0.5})
    assert set(errors) == {"x1", "x2"}
    assert max(errors.values()) < 1e-6


def test_check_gradient_matrix():
    w = matrix("w", 2, 2)
    loss = msum(matmul(w, w))
    env = {"w": np.array([[0.3, -1.2], [0.7, 2.0]])}
    errors = check_gradient(loss, env, names=["w"])
    assert errors["w"] < 1e-6
    # env itself is left alone
    np.testing.assert_array_equal(env["w"], [[0.3, -1.2], [0.7, 2.0]])
