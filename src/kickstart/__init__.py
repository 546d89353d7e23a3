"""kickstart - bootstrap runnable project skeletons from templates."""

__version__ = "0.3.0"
