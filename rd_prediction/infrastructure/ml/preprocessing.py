"""Image decoding and tensor preparation for the classifiers."""

from io import BytesIO

import numpy as np
from PIL import Image, UnidentifiedImageError

from rd_prediction.core.exceptions import InferenceError
from rd_prediction.infrastructure.ml.model_configs import INPUT_SIZE


def preprocess_image(image_bytes: bytes, size: tuple[int, int] = INPUT_SIZE) -> np.ndarray:
    """
    Decode an image into a normalized NHWC float32 batch of one.

    The image is converted to RGB, resized bilinearly to ``size`` and scaled
    to [0, 1].

    Raises:
        InferenceError: If the bytes are not a decodable image
    """
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            rgb = img.convert("RGB").resize(size, Image.Resampling.BILINEAR)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise InferenceError(f"Unable to decode image: {e}") from e

    arr = np.asarray(rgb, dtype=np.float32) / 255.0
    return np.expand_dims(arr, 0)


def softmax(values: np.ndarray) -> np.ndarray:
    shifted = values - np.max(values)
    exp = np.exp(shifted)
    return exp / exp.sum()


def to_probabilities(raw: np.ndarray, class_count: int) -> np.ndarray:
    """
    Turn a raw model output into one probability per class.

    A single sigmoid output for a two-class model is expanded to
    ``[1 - p, p]``. Anything that is not already a probability vector is
    passed through softmax.

    Raises:
        InferenceError: If the output size does not match the class count
    """
    scores = np.asarray(raw, dtype=np.float64).reshape(-1)
    if scores.size == 1 and class_count == 2:
        p = float(np.clip(scores[0], 0.0, 1.0))
        return np.array([1.0 - p, p])
    if scores.size != class_count:
        raise InferenceError(
            f"Model returned {scores.size} outputs for {class_count} classes"
        )
    if not np.all(np.isfinite(scores)):
        raise InferenceError("Model returned non-finite scores")
    if np.all(scores >= 0.0) and np.all(scores <= 1.0) and abs(scores.sum() - 1.0) < 1e-3:
        return scores
    return softmax(scores)
