"""storysync - replicate requirements-dashboard work items into an issue tracker."""

__version__ = "0.1.0"
