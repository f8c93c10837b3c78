from .pareto import crowding_distance, nondominated_mask, pareto_filter

__all__ = ["crowding_distance", "nondominated_mask", "pareto_filter"]
