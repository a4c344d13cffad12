from .distances import compute_distance, metric_distances
from .selector import select_neighbors, score_points

__all__ = ['compute_distance', 'metric_distances', 'select_neighbors', 'score_points']
