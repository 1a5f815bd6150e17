"""Interactive line-oriented command shell with tab completion."""

__version__ = "0.1.0"
