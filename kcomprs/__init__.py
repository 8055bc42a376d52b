"""Color reduction for images using k-means clustering, with a command line front end."""

__version__ = "0.2.0"
__all__ = ["__version__"]