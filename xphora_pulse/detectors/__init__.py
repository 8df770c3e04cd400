from .base import Detector
from .community import CommunityTrendDetector
from .infrastructure import InfrastructurePatternDetector
from .safety import SafetyRiskDetector
from .traffic import TrafficPredictionDetector

__all__ = [
    "Detector",
    "CommunityTrendDetector",
    "InfrastructurePatternDetector",
    "SafetyRiskDetector",
    "TrafficPredictionDetector",
]
