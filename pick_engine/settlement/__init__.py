"""Settlement: grade predictions against final scores and aggregate results."""
