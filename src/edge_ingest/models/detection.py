"""
Detection models - raw prediction output and interpreted detections.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PredictionResult:
    """Index-aligned class ids and scores from one prediction instance."""

    class_ids: tuple[int, ...]
    scores: tuple[float, ...]

    def __post_init__(self):
        if len(self.class_ids) != len(self.scores):
            raise ValueError(
                f"class_ids ({len(self.class_ids)}) and scores ({len(self.scores)}) differ in length"
            )

    def pairs(self) -> list[tuple[int, float]]:
        return list(zip(self.class_ids, self.scores))


@dataclass(frozen=True)
class Detection:
    """A labelled detection above the score threshold. Never persisted."""

    label: str
    score: float
    class_id: int

    def __repr__(self) -> str:
        return f"({self.label!r}, {self.score:.3f})"
