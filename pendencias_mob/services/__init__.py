"""Pipeline services: resolve, normalize, gate, filter, select and export."""
