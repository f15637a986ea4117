"""cstore sales dashboard: metrics, multilingual query engine, ingestion and UI."""

__version__ = "0.1.0"
