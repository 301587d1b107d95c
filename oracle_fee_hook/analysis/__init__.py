from .analyzer import FeeCurveAnalyzer, fee_curve_frame
from .visualizer import FeeCurveVisualizer

__all__ = [
    'FeeCurveAnalyzer',
    'fee_curve_frame',
    'FeeCurveVisualizer'
]
