import os
from unittest import TestCase, mock

from domaintensor import config
from domaintensor.config import TensorConfig, config_context, get_config, set_config
from domaintensor.dense import DenseVector


class TestConfig(TestCase):
    def test_defaults(self):
        defaults = TensorConfig()
        assert defaults.dtype == "float64"
        assert defaults.atol == 1e-8
        assert defaults.rtol == 1e-5
        assert defaults.log_evaluations is False

    def test_from_env(self):
        env = {
            "DOMAINTENSOR_DTYPE": "float32",
            "DOMAINTENSOR_ATOL": "0.5",
            "DOMAINTENSOR_LOG_EVALUATIONS": "true",
        }
        with mock.patch.dict(os.environ, env):
            loaded = TensorConfig.from_env()
        assert loaded.dtype == "float32"
        assert loaded.atol == 0.5
        assert loaded.rtol == 1e-5
        assert loaded.log_evaluations is True

    def test_set_config(self):
        updated = set_config(atol=0.1)
        assert get_config() is updated
        assert updated.atol == 0.1
        with self.assertRaises(TypeError):
            set_config(precision=3)

    def test_set_config_does_not_mutate_previous(self):
        previous = get_config()
        set_config(rtol=0.5)
        assert get_config() is not previous
        assert previous.rtol != 0.5

    def test_config_context_restores(self):
        previous = get_config()
        with config_context(atol=1.0) as active:
            assert get_config() is active
            assert DenseVector([0.0]).allclose(DenseVector([0.9]))
        assert get_config() is previous
        assert not DenseVector([0.0]).allclose(DenseVector([0.9]))

    def test_config_context_restores_on_error(self):
        previous = config._config
        with self.assertRaises(RuntimeError):
            with config_context(dtype="float32"):
                raise RuntimeError("boom")
        assert config._config is previous

    def test_non_float_dtype_is_rejected(self):
        previous = get_config()
        for dtype in ("int64", "bool", "complex128"):
            with self.assertRaises(ValueError):
                set_config(dtype=dtype)
            assert get_config() is previous
        with self.assertRaises(ValueError):
            TensorConfig(dtype="int32")

    def test_config_context_rejects_integer_dtype(self):
        previous = config._config
        with self.assertRaises(ValueError):
            with config_context(dtype="int64"):
                DenseVector([0.5])
        assert config._config is previous
        assert DenseVector([0.5])[0] == 0.5

    def test_from_env_rejects_integer_dtype(self):
        with mock.patch.dict(os.environ, {"DOMAINTENSOR_DTYPE": "int64"}):
            with self.assertRaises(ValueError):
                TensorConfig.from_env()

    def test_float32_dtype_is_accepted(self):
        with config_context(dtype="float32"):
            assert DenseVector([1.0, 2.0]).data.dtype == "float32"
