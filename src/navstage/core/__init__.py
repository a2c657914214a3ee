"""Navigation tree model and locale resolution."""
