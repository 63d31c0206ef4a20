import numpy as np
import torch  # for comparison
from unittest import TestCase

from domaintensor import vectors
from domaintensor.dense import DenseMatrix, DenseVector
from domaintensor.errors import DomainError
from domaintensor.sparse import SparseVector


class TestConstructors(TestCase):
    def test_linspace(self):
        points = vectors.linspace(0, 1, 5)
        np.testing.assert_allclose(points.to_numpy(), [0.0, 0.25, 0.5, 0.75, 1.0])
        assert vectors.linspace(-1, 1).size == 100

    def test_ones_and_zeros(self):
        np.testing.assert_array_equal(vectors.ones(3).to_numpy(), np.ones(3))
        np.testing.assert_array_equal(vectors.zeros(4).to_numpy(), np.zeros(4))


class TestElementwise(TestCase):
    def setUp(self) -> None:
        self.vector = DenseVector([1.0, 4.0, 9.0])
        self.vector_torch = torch.tensor(self.vector.data)

    def test_log_and_sqrt_match_torch(self):
        np.testing.assert_allclose(
            vectors.log(self.vector).to_numpy(), torch.log(self.vector_torch).numpy()
        )
        np.testing.assert_allclose(
            vectors.sqrt(self.vector).to_numpy(), torch.sqrt(self.vector_torch).numpy()
        )

    def test_input_is_unchanged(self):
        vectors.sqrt(self.vector)
        np.testing.assert_array_equal(self.vector.to_numpy(), [1.0, 4.0, 9.0])

    def test_maps_default_and_keeps_sparsity(self):
        v = SparseVector(10, default=4.0)
        v[2] = 16.0
        roots = vectors.sqrt(v)
        assert isinstance(roots, SparseVector)
        assert roots.default == 2.0
        assert roots[2] == 4.0
        assert roots.nnz == 1

    def test_log_of_zero(self):
        logs = vectors.log(SparseVector(3))
        assert logs.default == float("-inf")

    def test_matrix(self):
        matrix = DenseMatrix([[1.0, 4.0], [9.0, 16.0]])
        np.testing.assert_allclose(vectors.sqrt(matrix).to_numpy(), [[1.0, 2.0], [3.0, 4.0]])


class TestSums(TestCase):
    def setUp(self) -> None:
        np.random.seed(42)
        self.data = np.random.randn(5, 6)
        self.vectors = [DenseVector(row) for row in self.data]

    def test_sum_vectors(self):
        total = vectors.sum_vectors(self.vectors)
        np.testing.assert_allclose(total.to_numpy(), self.data.sum(axis=0))
        np.testing.assert_array_equal(self.vectors[0].to_numpy(), self.data[0])

    def test_mean_vectors_matches_torch(self):
        mean = vectors.mean_vectors(self.vectors)
        np.testing.assert_allclose(
            mean.to_numpy(), torch.tensor(self.data).mean(dim=0).numpy()
        )

    def test_sparse_sum(self):
        a = SparseVector(4, default=1.0)
        b = SparseVector(4)
        b[1] = 2.0
        total = vectors.sum_vectors([a, b])
        assert total.default == 1.0
        assert total[1] == 3.0
        assert a[1] == 1.0

    def test_empty(self):
        with self.assertRaises(ValueError):
            vectors.sum_vectors([])
        with self.assertRaises(ValueError):
            vectors.mean_vectors([])

    def test_domain_mismatch(self):
        with self.assertRaises(DomainError):
            vectors.sum_vectors([DenseVector([1.0]), DenseVector([1.0, 2.0])])
