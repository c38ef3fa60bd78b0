"""Metric keys, recorders, layers, registries, buckets, histograms and quantile summaries."""

__version__ = "0.1.0"