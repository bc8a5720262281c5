import math
from typing import Sequence, Union

import numpy as np

from constants import DISTANCE_DECIMALS, EARTH_RADIUS_KM
from mission_data import Base, Target

Point = Union[Base, Target]

def planar_distance(point1: Point, point2: Point) -> float: #euclidean distance
    return math.hypot(point2.x - point1.x, point2.y - point1.y)

def geographic_distance(point1: Point, point2: Point, earth_radius: float = EARTH_RADIUS_KM) -> float:
    #haversine distance in km, x is latitude and y is longitude in degrees
    d_lat = math.radians(point2.x - point1.x)
    d_lon = math.radians(point2.y - point1.y)
    a = (math.sin(d_lat / 2) ** 2 +
         math.cos(math.radians(point1.x)) * math.cos(math.radians(point2.x)) * math.sin(d_lon / 2) ** 2)
    return earth_radius * 2 * math.asin(min(1.0, math.sqrt(a)))

def distance_matrix(points: Sequence[Point], is_geographic: bool = False,
                    decimals: int = DISTANCE_DECIMALS) -> np.ndarray:
    """Pairwise distances between all points, rounded to `decimals` places."""
    distance = geographic_distance if is_geographic else planar_distance
    n = len(points)
    matrix = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(n):
            matrix[i, j] = distance(points[i], points[j])
    return np.round(matrix, decimals)
