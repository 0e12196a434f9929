"""Recognition output handling and screen classification.

This sub-package turns recognized text into typed elements, assigns each a
role and groups rows into UI components using the component catalog.
"""

from .models import ContentBounds, DetectedIcon, RawTextElement, TapPoint, WindowSize
from .recognition import CompositeTextRecognizer, TextRecognizer, scale_to_window
from .element_classifier import ClassifiedElement, ElementClassifier, ElementRole
from .components import COMPONENT_CATALOG, ComponentDefinition, load_definitions, merged_catalog
from .component_detector import ComponentDetector, ScreenComponent
from .classifiers import (
    ComponentClassifier,
    ComponentDetectionMode,
    CompositeClassifier,
    HeuristicClassifier,
)

__all__ = [
    "COMPONENT_CATALOG",
    "ClassifiedElement",
    "ComponentClassifier",
    "ComponentDefinition",
    "ComponentDetectionMode",
    "ComponentDetector",
    "CompositeClassifier",
    "CompositeTextRecognizer",
    "ContentBounds",
    "DetectedIcon",
    "ElementClassifier",
    "ElementRole",
    "HeuristicClassifier",
    "RawTextElement",
    "ScreenComponent",
    "TapPoint",
    "TextRecognizer",
    "WindowSize",
    "load_definitions",
    "merged_catalog",
    "scale_to_window",
]
