"""Static JSON resources shipped with the package."""
