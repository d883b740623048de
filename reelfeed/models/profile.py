import math

from pydantic import BaseModel, ConfigDict, Field


class KeywordWeightVector(BaseModel):
    """
    Sparse keyword vector: normalized token -> accumulated non-negative weight.

    Built additively; insertion order never affects scoring.
    """

    values: dict[str, float] = Field(default_factory=dict)

    def add(self, token: str, weight: float) -> None:
        if weight <= 0:
            return
        self.values[token] = self.values.get(token, 0.0) + weight

    def add_all(self, tokens: set[str], weight: float) -> None:
        for token in tokens:
            self.add(token, weight)

    def weight_of(self, token: str) -> float:
        return self.values.get(token, 0.0)

    def magnitude(self) -> float:
        """Euclidean norm over the weights."""
        return math.sqrt(sum(w * w for w in self.values.values()))

    def get_top_features(self, limit: int = 12) -> list[tuple[str, float]]:
        """Return top N keywords by weight (ties broken alphabetically for stability)."""
        sorted_items = sorted(self.values.items(), key=lambda x: (-x[1], x[0]))
        return sorted_items[:limit]

    def __len__(self) -> int:
        return len(self.values)


class UserProfile(BaseModel):
    """
    The viewer's interest vector for one request.

    Computed once by the ProfileBuilder and read-only afterwards.
    """

    model_config = ConfigDict(frozen=True)

    keywords: KeywordWeightVector = Field(default_factory=KeywordWeightVector)
    magnitude: float = 0.0

    @classmethod
    def from_vector(cls, vector: KeywordWeightVector) -> "UserProfile":
        return cls(keywords=vector, magnitude=vector.magnitude())

    @property
    def is_empty(self) -> bool:
        return self.magnitude <= 0.0

    def get_top_keywords(self, limit: int = 12) -> list[str]:
        return [token for token, _ in self.keywords.get_top_features(limit)]
