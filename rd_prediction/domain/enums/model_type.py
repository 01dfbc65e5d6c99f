"""Classifier keys known to the model dispatcher."""

from enum import Enum

from rd_prediction.domain.exceptions import InvalidModelError

AUTO_DETECT = "auto"


class ModelType(str, Enum):
    """The fixed set of image classifiers the service can run."""

    PNEUMONIA = "pneumonia"
    BRAIN_TUMOR = "brainTumor"
    TUBERCULOSIS = "tuberculosis"

    @classmethod
    def parse(cls, value: str | None) -> "ModelType | None":
        """
        Resolve a client-supplied model key.

        Args:
            value: Raw key from the request, possibly empty or ``"auto"``

        Returns:
            The matching ModelType, or None when the caller asked for auto-detection

        Raises:
            InvalidModelError: If the key is not a known classifier
        """
        if value is None:
            return None
        key = value.strip()
        if not key or key == AUTO_DETECT:
            return None
        for member in cls:
            if member.value == key:
                return member
        raise InvalidModelError(key)
