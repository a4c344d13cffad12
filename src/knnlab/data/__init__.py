from .generator import generate_dataset, snap_to_grid, dataset_to_frame, class_distribution

__all__ = ['generate_dataset', 'snap_to_grid', 'dataset_to_frame', 'class_distribution']
