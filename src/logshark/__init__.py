"""
Logshark: plugins that turn parsed log documents into analysis tables.

Each plugin streams its documents out of MongoDB, maps them to typed records
in parallel, and writes them in batches to a SQL destination.
"""

__version__ = "0.1.0"
