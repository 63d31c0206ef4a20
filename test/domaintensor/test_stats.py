import math

import numpy as np
import torch  # for comparison
from unittest import TestCase

from domaintensor import stats
from domaintensor.dense import DenseVector
from domaintensor.domain import SetDomain
from domaintensor.sparse import SparseTensor1, SparseVector


class TestMoments(TestCase):
    def setUp(self) -> None:
        np.random.seed(42)
        self.sparse = SparseVector(1000)
        self.sparse += 1
        self.sparse.update_keys(range(100), np.random.rand(100))
        self.dense = self.sparse.to_numpy()

    def test_sparse_moments_match_dense_values(self):
        assert math.isclose(stats.mean(self.sparse), stats.mean(self.dense), abs_tol=1e-10)
        assert math.isclose(
            stats.variance(self.sparse), stats.variance(self.dense), abs_tol=1e-10
        )
        assert math.isclose(stats.std(self.sparse), stats.std(self.dense), abs_tol=1e-10)

    def test_moments_match_torch(self):
        reference = torch.tensor(self.dense)
        assert math.isclose(stats.mean(self.sparse), reference.mean().item(), abs_tol=1e-10)
        assert math.isclose(
            stats.variance(self.sparse), reference.var().item(), abs_tol=1e-10
        )
        assert math.isclose(stats.std(self.sparse), reference.std().item(), abs_tol=1e-10)

    def test_mean_of_iterable(self):
        assert math.isclose(stats.mean([1, 3, 22, 17]), (1 + 3 + 22 + 17) / 4.0)

    def test_variance_of_iterable(self):
        values = [
            0.29854716128994807,
            0.9984567314422015,
            0.3056949899038196,
            0.8748240977963917,
            0.6866542395503176,
            0.48871321020847913,
            0.23221169231853678,
            0.992966911646403,
            0.8839015907147733,
            0.6435495508602755,
        ]
        assert math.isclose(stats.variance(values), 0.08749136216928063, abs_tol=1e-10)
        assert math.isclose(
            stats.variance(DenseVector(values)), 0.08749136216928063, abs_tol=1e-10
        )

    def test_variance_of_fewer_than_two_values(self):
        assert math.isnan(stats.variance([1.0]))
        assert math.isnan(stats.variance([]))
        assert math.isnan(stats.variance(SparseVector(1)))

    def test_mean_of_nothing(self):
        with self.assertRaises(ValueError):
            stats.mean([])
        with self.assertRaises(ValueError):
            stats.mean(SparseVector(0))

    def test_mean_of_all_default_vector(self):
        assert stats.mean(SparseVector(50, default=2.5)) == 2.5
        assert stats.variance(SparseVector(50, default=2.5)) == 0.0


class TestReductions(TestCase):
    def setUp(self) -> None:
        self.words = SparseTensor1(
            SetDomain(["a", "b", "c", "d"]), default=1.0, values={"a": 4.0, "b": -2.0}
        )

    def test_sum_and_sumsq_count_defaults(self):
        assert stats.sum(self.words) == 4.0 - 2.0 + 2 * 1.0
        assert stats.sumsq(self.words) == 16.0 + 4.0 + 2 * 1.0
        assert stats.sum(SparseVector(10, default=0.5)) == 5.0

    def test_sum_of_iterable(self):
        assert stats.sum([1.0, 2.0, 3.5]) == 6.5
        assert stats.sum([]) == 0.0

    def test_max(self):
        assert stats.max(self.words) == 4.0
        self.words.default = 10.0
        assert stats.max(self.words) == 10.0
        assert stats.max([3, 1, 2]) == 3.0
        with self.assertRaises(ValueError):
            stats.max([])


class TestNorm(TestCase):
    def setUp(self) -> None:
        self.values = [-0.4326, -1.6656, 0.1253, 0.2877, -1.1465]
        self.vector = DenseVector(self.values)

    def test_norms(self):
        expected = {
            1: 3.6577,
            2: 2.0915,
            3: 1.8405,
            4: 1.7541,
            5: 1.7146,
            6: 1.6940,
            float("inf"): 1.6656,
        }
        for p, norm in expected.items():
            assert math.isclose(stats.norm(self.values, p), norm, abs_tol=1e-4)
            assert math.isclose(self.vector.norm(p), norm, abs_tol=1e-4)

    def test_norms_match_torch(self):
        reference = torch.tensor(self.values, dtype=torch.float64)
        for p in (1, 2, 3, 2.5, float("inf")):
            assert math.isclose(
                self.vector.norm(p), torch.linalg.vector_norm(reference, p).item()
            )

    def test_sparse_norm_counts_default(self):
        v = SparseVector(100, default=-1.0)
        v[0] = 5.0
        assert v.norm(1) == 5.0 + 99.0
        assert math.isclose(v.norm(2), math.sqrt(25.0 + 99.0))
        assert v.norm(float("inf")) == 5.0

    def test_empty_norm(self):
        assert stats.norm([], 2) == 0.0
        assert stats.norm([], float("inf")) == 0.0

    def test_invalid_order(self):
        for p in (0, -1, float("nan")):
            with self.assertRaises(ValueError):
                self.vector.norm(p)
