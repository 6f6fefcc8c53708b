"""Vector operations over embeddings."""

from typing import Sequence, Union
import numpy as np

from ..utils.error_handling import DimensionMismatchError, EmptyInputError

VectorLike = Union[Sequence[float], np.ndarray]


def _as_vector(vector: VectorLike) -> np.ndarray:
    return np.asarray(vector, dtype=np.float64).ravel()


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    Calculate cosine similarity between two embeddings.

    A zero vector on either side scores exactly 0.0.

    Args:
        a: First embedding vector
        b: Second embedding vector

    Returns:
        Cosine similarity score (-1 to 1)

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    vec_a = _as_vector(a)
    vec_b = _as_vector(b)

    if vec_a.shape[0] != vec_b.shape[0]:
        raise DimensionMismatchError(vec_a.shape[0], vec_b.shape[0])

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)

    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = np.dot(vec_a, vec_b) / (norm_a * norm_b)
    return float(np.clip(similarity, -1.0, 1.0))


def batch_cosine_similarity(reference: VectorLike, candidates: np.ndarray) -> np.ndarray:
    """
    Calculate cosine similarity between a reference and each candidate row.

    Args:
        reference: Reference embedding (1D)
        candidates: Candidate embeddings (2D, one row per candidate)

    Returns:
        Array of similarity scores, 0.0 for zero-norm rows
    """
    query = _as_vector(reference)
    matrix = np.asarray(candidates, dtype=np.float64)

    if matrix.size == 0:
        return np.zeros(0)

    if matrix.ndim != 2 or matrix.shape[1] != query.shape[0]:
        actual = matrix.shape[-1] if matrix.ndim else 0
        raise DimensionMismatchError(query.shape[0], actual)

    query_norm = np.linalg.norm(query)
    if query_norm == 0:
        return np.zeros(matrix.shape[0])

    row_norms = np.linalg.norm(matrix, axis=1)
    denominators = row_norms * query_norm
    dots = matrix @ query

    similarities = np.divide(
        dots,
        denominators,
        out=np.zeros_like(dots),
        where=denominators != 0
    )
    return np.clip(similarities, -1.0, 1.0)


def average(vectors: Sequence[VectorLike]) -> np.ndarray:
    """
    Element-wise mean of equal-length vectors.

    Args:
        vectors: Non-empty sequence of vectors

    Returns:
        Mean vector

    Raises:
        EmptyInputError: If no vectors are given
        DimensionMismatchError: If the vectors differ in length
    """
    if len(vectors) == 0:
        raise EmptyInputError()

    rows = [_as_vector(vector) for vector in vectors]
    dimension = rows[0].shape[0]

    for row in rows[1:]:
        if row.shape[0] != dimension:
            raise DimensionMismatchError(dimension, row.shape[0])

    return np.mean(np.vstack(rows), axis=0)
