"""Survey scoring: shares, composite scores, Likert, NPS, tallies and narrative."""

from surveyscore.analysis.engine import compute, compute_design_choice, compute_product_survey
from surveyscore.analysis.models import DesignChoiceResult, ProductSurveyResult
from surveyscore.analysis.shape import ShapeError

__all__ = [
    "DesignChoiceResult",
    "ProductSurveyResult",
    "ShapeError",
    "compute",
    "compute_design_choice",
    "compute_product_survey",
]
