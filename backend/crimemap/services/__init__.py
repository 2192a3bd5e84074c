"""Risk assessment services and external collaborator clients."""

from crimemap.services.errors import RiskInputError, UpstreamServiceError
from crimemap.services.grid import build_feature_collection
from crimemap.services.perimeter import assess_perimeter
from crimemap.services.prediction_client import PredictionClient
from crimemap.services.route import assess_route
from crimemap.services.safety_analyst import SafetyAnalyst

__all__ = [
    "PredictionClient",
    "RiskInputError",
    "SafetyAnalyst",
    "UpstreamServiceError",
    "assess_perimeter",
    "assess_route",
    "build_feature_collection",
]
