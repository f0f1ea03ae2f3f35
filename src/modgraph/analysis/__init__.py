"""Static analysis: the module system."""
