"""Assignment units: overlord base, priorities, setups and concrete kinds."""
