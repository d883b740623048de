"""
Interest profile: tokenization and recency-weighted keyword vectors.
"""

from reelfeed.services.profile.builder import ProfileBuilder
from reelfeed.services.profile.similarity import cosine_similarity
from reelfeed.services.profile.tokenizer import Tokenizer, extract_keywords

__all__ = [
    "ProfileBuilder",
    "Tokenizer",
    "cosine_similarity",
    "extract_keywords",
]
