"""CottonTrace - cotton supply-chain traceability and compliance dashboards."""

__version__ = "0.3.0"
