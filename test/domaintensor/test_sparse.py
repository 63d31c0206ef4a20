import numpy as np
from unittest import TestCase

from domaintensor.dense import DenseMatrix, DenseVector
from domaintensor.domain import Domain2, IntSpanDomain, SetDomain
from domaintensor.errors import TensorCreateError, TensorIndexError
from domaintensor.sparse import (
    SparseMatrix,
    SparseTensor1,
    SparseTensor2,
    SparseVector,
    create_sparse,
)


class TestSparseVector(TestCase):
    def setUp(self) -> None:
        self.vector = SparseVector(1000)
        self.vector[3] = 4.0
        self.vector[10] = -1.0

    def test_reads_default_outside_active_domain(self):
        assert self.vector[0] == 0.0
        assert self.vector[3] == 4.0
        assert self.vector.nnz == 2
        assert set(self.vector.active_domain) == {3, 10}

    def test_out_of_domain(self):
        with self.assertRaises(TensorIndexError):
            self.vector[1000]
        with self.assertRaises(TensorIndexError):
            self.vector[-1] = 1.0

    def test_scalar_add_keeps_sparsity(self):
        self.vector += 1
        assert self.vector.nnz == 2
        assert self.vector[500] == 1.0
        assert self.vector[3] == 5.0

    def test_compact(self):
        self.vector[20] = 0.0
        assert self.vector.nnz == 3
        self.vector.compact()
        assert self.vector.nnz == 2
        assert self.vector[20] == 0.0

        self.vector += 1
        self.vector[3] = 1.0
        self.vector.compact()
        assert set(self.vector.active_domain) == {10}

    def test_to_numpy(self):
        array = self.vector.to_numpy()
        assert array.shape == (1000,)
        assert array[3] == 4.0
        assert array.sum() == 3.0

    def test_dot_with_dense(self):
        dense = DenseVector(np.arange(1000))
        assert self.vector.dot(dense) == 4.0 * 3 - 10.0
        assert dense.dot(self.vector) == 4.0 * 3 - 10.0

    def test_copy_keeps_type(self):
        copied = self.vector.copy()
        assert isinstance(copied, SparseVector)
        copied[3] = 0.0
        assert self.vector[3] == 4.0

    def test_repr(self):
        assert repr(self.vector) == "SparseVector(size=1000, default=0.0, nnz=2)"


class TestSparseTensor1(TestCase):
    def setUp(self) -> None:
        self.domain = SetDomain(["apple", "banana", "cherry"])
        self.counts = SparseTensor1(self.domain, values={"apple": 3.0})

    def test_initial_values_must_be_in_domain(self):
        with self.assertRaises(TensorIndexError):
            SparseTensor1(self.domain, values={"durian": 1.0})

    def test_any_hashable_keys(self):
        assert self.counts["banana"] == 0.0
        self.counts["banana"] += 2
        assert self.counts.to_dict() == {"apple": 3.0, "banana": 2.0, "cherry": 0.0}

    def test_create(self):
        created = self.counts.create(self.domain)
        assert isinstance(created, SparseTensor1)
        assert created.domain == self.domain
        assert created.nnz == 0

    def test_norm_counts_default(self):
        self.counts.default = 1.0
        assert self.counts.norm(1) == 5.0
        assert np.isclose(self.counts.norm(2), np.sqrt(11.0))


class TestSparseTensor2(TestCase):
    def setUp(self) -> None:
        self.rows = SetDomain(["a", "b"])
        self.cols = SetDomain(["x", "y", "z"])
        self.matrix = SparseTensor2(
            Domain2(self.rows, self.cols), values={("a", "x"): 1.0, ("b", "z"): 2.0}
        )

    def test_apply_and_update(self):
        assert self.matrix.apply("a", "y") == 0.0
        self.matrix.update("a", "y", 5.0)
        assert self.matrix["a", "y"] == 5.0
        assert self.matrix.nnz == 3
        with self.assertRaises(TensorIndexError):
            self.matrix.apply("c", "x")

    def test_transpose(self):
        transposed = self.matrix.T
        assert transposed.domain == Domain2(self.cols, self.rows)
        assert transposed["z", "b"] == 2.0
        assert transposed.active_domain == {("x", "a"), ("z", "b")}

    def test_matmul(self):
        vector = SparseTensor1(self.cols, values={"x": 2.0, "z": 3.0})
        result = self.matrix.matmul(vector)
        assert isinstance(result, SparseTensor1)
        assert result["a"] == 2.0
        assert result["b"] == 6.0

        gram = self.matrix.matmul(self.matrix.T)
        assert gram.domain == Domain2(self.rows, self.rows)
        assert gram["a", "a"] == 1.0
        assert gram["b", "b"] == 4.0
        assert gram["a", "b"] == 0.0

    def test_matmul_with_defaults(self):
        vector = SparseTensor1(self.cols, default=1.0)
        result = self.matrix.matmul(vector)
        assert result["a"] == 1.0
        assert result["b"] == 2.0


class TestSparseMatrix(TestCase):
    def test_matmul_matches_dense(self):
        np.random.seed(0)
        data = np.random.randn(4, 3)
        data[data < 0] = 0.0
        sparse = SparseMatrix(4, 3)
        for (i, j), value in np.ndenumerate(data):
            if value:
                sparse[i, j] = value
        other = np.random.randn(3, 2)

        product = sparse.matmul(DenseMatrix(other))
        assert isinstance(product, SparseMatrix)
        np.testing.assert_allclose(product.to_numpy(), data @ other)

        vector = np.random.randn(3)
        np.testing.assert_allclose(
            sparse.matmul(DenseVector(vector)).to_numpy(), data @ vector
        )

    def test_repr(self):
        assert repr(SparseMatrix(2, 3)) == "SparseMatrix(2x3, default=0.0, nnz=0)"


class TestCreateSparse(TestCase):
    def test_storage_kinds(self):
        assert isinstance(create_sparse(IntSpanDomain(0, 3)), SparseVector)
        assert type(create_sparse(SetDomain([1]))) is SparseTensor1
        assert type(create_sparse(IntSpanDomain(2, 5))) is SparseTensor1
        assert isinstance(
            create_sparse(Domain2(IntSpanDomain(0, 2), IntSpanDomain(0, 2))), SparseMatrix
        )
        assert type(create_sparse(Domain2(SetDomain([1]), IntSpanDomain(0, 2)))) is (
            SparseTensor2
        )
        assert create_sparse(IntSpanDomain(0, 3), default=2.0).default == 2.0

    def test_unknown_domain(self):
        with self.assertRaises(TensorCreateError):
            create_sparse(object())
