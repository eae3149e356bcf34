"""Elasticsearch client: a chainable search DSL with index, mapping and snapshot helpers."""

__version__ = "0.1.0"