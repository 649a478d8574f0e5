"""Personal nutrition and cost tracker."""
