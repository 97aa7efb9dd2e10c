"""pyktree - 3D radial visualization of analysed concept trees."""

__version__ = "0.1.0"
