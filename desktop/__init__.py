"""Desktop front-end for the expense tracker."""
