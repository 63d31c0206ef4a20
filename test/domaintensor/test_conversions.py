import numpy as np
from unittest import TestCase

from domaintensor.conversions import as_tensor1, as_tensor2
from domaintensor.dense import DenseMatrix, DenseVector
from domaintensor.domain import SetDomain
from domaintensor.sparse import SparseTensor1


class TestConversions(TestCase):
    def test_tensor_passes_through(self):
        vector = DenseVector([1.0])
        matrix = DenseMatrix([[1.0]])
        assert as_tensor1(vector) is vector
        assert as_tensor2(matrix) is matrix

    def test_mapping_becomes_sparse(self):
        data = {"x": 1.0, "y": 2.0}
        tensor = as_tensor1(data)
        assert isinstance(tensor, SparseTensor1)
        assert tensor.domain == SetDomain(["x", "y"])
        assert tensor["y"] == 2.0
        data["y"] = 5.0
        assert tensor["y"] == 2.0

    def test_sequences_become_dense(self):
        np.testing.assert_array_equal(as_tensor1([1, 2, 3]).to_numpy(), [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(as_tensor1(np.arange(3)).to_numpy(), [0.0, 1.0, 2.0])
        np.testing.assert_array_equal(as_tensor1([True, False]).to_numpy(), [1.0, 0.0])
        assert isinstance(as_tensor2([[1, 2], [3, 4]]), DenseMatrix)

    def test_array_is_copied(self):
        array = np.zeros(3)
        tensor = as_tensor1(array)
        array[0] = 1.0
        assert tensor[0] == 0.0

    def test_rejects_wrong_shape_or_type(self):
        for bad in ([[1.0, 2.0]], 3.0, ["a", "b"]):
            with self.assertRaises(TypeError):
                as_tensor1(bad)
        for bad in ([1.0, 2.0], [["a"]]):
            with self.assertRaises(TypeError):
                as_tensor2(bad)
