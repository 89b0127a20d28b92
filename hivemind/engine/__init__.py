"""Engine layer: colonies, the per-colony overseer, spawn queue and the tick driver."""
