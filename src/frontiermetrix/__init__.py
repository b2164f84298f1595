"""FrontierMetrix: great-circle flow arcs and a debounced signal pipeline."""

__version__ = "0.1.0"
