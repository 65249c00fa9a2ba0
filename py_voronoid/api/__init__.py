"""HTTP surface for the layout engine."""
