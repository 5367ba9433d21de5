"""Console package: command tree, handlers and the interaction loop."""
