"""
Prediction interpretation - turns raw model output into labelled detections.
"""

from ..models.detection import Detection, PredictionResult
from ..utils.constants import SCORE_THRESHOLD
from .labels import get_label


def interpret_prediction(
    result: PredictionResult,
    threshold: float = SCORE_THRESHOLD,
    labels: dict[int, str] | None = None,
) -> list[Detection]:
    """
    Pair class ids with scores, keep those scoring above threshold, and label them.

    The comparison is strict: a score equal to the threshold is dropped.
    Model order is preserved.

    Args:
        result: Raw prediction for one image
        threshold: Minimum score (exclusive)
        labels: Label table, COCO_LABELS by default

    Returns:
        Filtered detections
    """
    return [
        Detection(label=get_label(class_id, labels), score=score, class_id=class_id)
        for class_id, score in result.pairs()
        if score > threshold
    ]
