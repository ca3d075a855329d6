"""HTTP blueprints for the calculators API."""
