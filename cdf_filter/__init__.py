"""Top-level public API for the ``cdf_filter`` package.

The package pairs a cumulative distribution of a numeric dataset with a
draggable threshold that counts how many values pass a comparison:

>>> from cdf_filter import CumulativeDensityFilter  # doctest: +SKIP
>>> flt = CumulativeDensityFilter([1, 2, 2, 5, 9], filter_mode="gte")  # doctest: +SKIP

The numeric core (scale mapping, distribution building, counting, ticks and
the drag state machine) has no widget dependencies. The notebook widget,
figure builder and drag driver live in the same namespace for convenience.
"""

from .distribution import (
    EXACT_POINTS_LIMIT,
    MAX_BINS,
    Distribution,
    DistributionPoint,
    build_distribution,
    sort_values,
)
from .drag_controller import (
    DragController,
    DragSubscription,
    PlotRect,
    SuppressibleEvent,
    ThresholdState,
    pointer_fraction,
)
from .drag_driver import ThresholdDragDriver
from .filter_figure import FilterStyle, build_filter_figure, clip_series, update_filter_figure
from .filter_model import CumulativeDensityFilter
from .filter_widget import CumulativeDensityFilterWidget
from .formatting import count_label, format_number_with_suffix, operator_symbol, threshold_caption
from .InputConvert import InputConvert
from .scale import ScaleConfig, fraction_to_value, threshold_to_percentage, value_to_fraction
from .threshold_count import (
    DEFAULT_FILTER_MODE,
    FILTER_MODES,
    FilterMode,
    get_count_at_threshold,
    highlight_span,
    lower_bound,
    normalize_filter_mode,
    passing_side,
    upper_bound,
)
from .ThresholdEvent import ThresholdEvent
from .ticks import MIN_AUTO_TICKS, PX_PER_TICK, compute_ticks, resolve_tick_count
