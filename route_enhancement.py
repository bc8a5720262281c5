from typing import List, NamedTuple, Optional, Sequence

import numpy as np

from route_construction import LegRouteBuilder
from route_model import SubPath

#nearest insertion: put the closest free target right before or right after a chosen stop

class Insertion(NamedTuple):
    slot: int           #position in the full route [start base, targets..., end base]
    time_in_air: float  #leg time after the insertion

def nearest_target_index(builder: LegRouteBuilder, point_index: int, excluded_ids: Sequence[int]) -> Optional[int]:
    mask = builder.candidate_mask(excluded_ids)
    if not builder.index.is_base(point_index):
        mask[point_index] = False
    if not mask.any():
        return None
    times = np.where(mask, builder.times[:builder.targets_count, point_index], np.inf)
    return int(np.argmin(times)) #first on equal times

def insertion_options(
        builder: LegRouteBuilder,
        sub_path: SubPath,
        position: int,
        new_index: int
) -> List[Insertion]:
    route = ([builder.start_index] + [builder.index.target(target_id) for target_id in sub_path.target_ids] +
             [builder.end_index])
    time_in_air = sub_path.time_in_air
    if sub_path.targets:
        slots = [position + 1, position + 2] #before, then after the chosen stop
    else:
        slots = [1]
    options = []
    for slot in slots:
        previous, following = route[slot - 1], route[slot]
        new_time = (time_in_air - builder.times[following, previous] +
                    builder.times[new_index, previous] + builder.times[following, new_index])
        options.append(Insertion(slot, float(new_time)))
    return options

def add_nearest(builder: LegRouteBuilder, sub_path: SubPath, position: int) -> Optional[SubPath]:
    """
    Insert the free target nearest to the stop at `position` on the
    cheaper side of it; None when no target is left or neither side fits
    the time budget.
    """
    target_ids = sub_path.target_ids
    anchor = builder.index.target(target_ids[position]) if target_ids else builder.start_index
    new_index = nearest_target_index(builder, anchor, target_ids)
    if new_index is None:
        return None
    best = None
    for option in insertion_options(builder, sub_path, position, new_index):
        if best is None or option.time_in_air < best.time_in_air:
            best = option
    if best.time_in_air > builder.max_time:
        return None
    new_id = builder.index.target_id(new_index)
    new_ids = target_ids[:best.slot - 1] + [new_id] + target_ids[best.slot - 1:]
    return builder.create_sub_path(new_ids)
