"""Internal implementation package for globemesh; import from ``globemesh`` instead."""
