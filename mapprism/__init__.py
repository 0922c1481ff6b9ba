"""MapPrism: recipe validation and job materialization for data-processing pipelines."""

__version__ = "0.1.0"
