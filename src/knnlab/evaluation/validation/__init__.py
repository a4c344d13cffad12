from .elbow import evaluate_k, find_optimal_k, error_curve_frame

__all__ = ['evaluate_k', 'find_optimal_k', 'error_curve_frame']
