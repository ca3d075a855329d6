"""External services used by the calculators."""
