from .lanes import axis_wise, check_axis, from_lanes
from .reducers import LANE_REDUCERS, LANE_SCANS, ReducerName, ScanName

__all__ = [
    "LANE_REDUCERS",
    "LANE_SCANS",
    "ReducerName",
    "ScanName",
    "axis_wise",
    "check_axis",
    "from_lanes",
]
