"""HTTP read/control surface over a running sandbox."""
