"""Geozone API: H3 hexagonal zone lookups over HTTP."""
