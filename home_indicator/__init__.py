"""Panel indicator showing the next routes home, refreshed from the ``home`` command."""

from home_indicator.indicator import HomeExtension, HomeIndicator, StatusArea
from home_indicator.routes import Failure, RouteDataSource, Success
from home_indicator.scheduler import RefreshScheduler

__all__ = [
    "Failure",
    "HomeExtension",
    "HomeIndicator",
    "RefreshScheduler",
    "RouteDataSource",
    "StatusArea",
    "Success",
]
