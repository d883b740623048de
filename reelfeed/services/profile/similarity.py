import math

from reelfeed.models.profile import UserProfile


def cosine(vec_a: dict[str, float], vec_b: dict[str, float]) -> float:
    """Cosine similarity between two sparse weight vectors; 0.0 if either is empty."""
    if not vec_a or not vec_b:
        return 0.0
    if len(vec_a) > len(vec_b):
        vec_a, vec_b = vec_b, vec_a

    dot = sum(w * vec_b.get(k, 0.0) for k, w in vec_a.items())
    norm_a = math.sqrt(sum(w * w for w in vec_a.values()))
    norm_b = math.sqrt(sum(w * w for w in vec_b.values()))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    # float error can push identical vectors a hair past 1
    return max(0.0, min(1.0, dot / (norm_a * norm_b)))


def cosine_similarity(profile: UserProfile, tokens: set[str]) -> float:
    """
    Relevance of a candidate to the profile.

    The candidate is a unit-weighted vector over its tokens, so the result is
    the sum of the profile weights of the shared tokens over
    (profile magnitude * sqrt(len(tokens))).
    """
    if not tokens or profile.is_empty:
        return 0.0
    return cosine(profile.keywords.values, dict.fromkeys(tokens, 1.0))
