"""RD Prediction: medical image classification service with prediction history."""

__version__ = "1.0.0"
