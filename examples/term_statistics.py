import logging

import numpy as np

from domaintensor import (
    DenseMatrix,
    SetDomain,
    SparseTensor1,
    SparseVector,
    config_context,
    stats,
    vectors,
)
from domaintensor.logger import setup_logger

logger = logging.getLogger(__name__)
np.random.seed(1337)

DOCUMENTS = [
    "the cat sat on the mat",
    "the dog sat on the log",
    "a cat and a dog",
]


def term_counts(document, vocabulary):
    counts = SparseTensor1(vocabulary)
    for word in document.split():
        counts[word] += 1
    return counts


def cosine(a, b):
    return a.dot(b) / (a.norm() * b.norm())


if __name__ == "__main__":
    setup_logger()
    setup_logger(__name__)

    # --- Sparse term vectors over a word domain ---
    vocabulary = SetDomain(word for doc in DOCUMENTS for word in doc.split())
    counts = [term_counts(doc, vocabulary) for doc in DOCUMENTS]
    centroid = vectors.mean_vectors(counts)
    logger.info(f"Vocabulary size: {len(vocabulary)}")
    logger.info(f"Mean count of 'the': {centroid['the']:.3f}")
    for i, doc in enumerate(counts):
        logger.info(f"cos(doc {i}, centroid) = {cosine(doc, centroid):.4f}")

    # --- Moments of a mostly-default vector ---
    v = SparseVector(1000)
    v += 1
    v.update_keys(range(100), np.random.rand(100))
    logger.info(
        f"nnz={v.nnz} mean={stats.mean(v):.6f} "
        f"variance={stats.variance(v):.6f} std={stats.std(v):.6f}"
    )

    # --- Lazy expressions over dense storage ---
    weights = DenseMatrix(np.random.randn(3, 4))
    x = vectors.linspace(-1, 1, 4)
    with config_context(log_evaluations=True):
        scores = (2 * (weights @ x) + 1).value
    logger.info(f"scores = {scores.to_numpy()}")
