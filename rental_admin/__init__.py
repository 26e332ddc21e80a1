"""System and pricing configuration backend for vehicle rentals."""
__version__ = "1.0.0"
