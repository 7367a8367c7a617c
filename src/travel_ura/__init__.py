"""URA Travel Query Package

Finds the buses that will visit all of a given sequence of stops, using
live predictions from URA instant endpoints such as ASEAG's or TfL's.
"""

__version__ = "0.1.0"

from .core.combinator import intersect
from .core.models import Prediction, PredictionSet, UraConfig
from .core.query import find_common_trips

__all__ = ["Prediction", "PredictionSet", "UraConfig", "find_common_trips", "intersect"]
