from replicate_client.errors import ApiError, ConfigurationError, NotFoundError, ReplicateError, TransportError
from replicate_client.models import ModelVersion, Prediction, PredictionStatus, RetryOptions, VersionResolution
from replicate_client.services.model import Model, resolve_version
from replicate_client.services.predictor import PredictionController
from replicate_client.services.replicate import ReplicateClient
from replicate_client.services.transport import HTTPTransport, Transport

__all__ = [
    "ApiError",
    "ConfigurationError",
    "HTTPTransport",
    "Model",
    "ModelVersion",
    "NotFoundError",
    "Prediction",
    "PredictionController",
    "PredictionStatus",
    "ReplicateClient",
    "ReplicateError",
    "RetryOptions",
    "Transport",
    "TransportError",
    "VersionResolution",
    "resolve_version",
]
