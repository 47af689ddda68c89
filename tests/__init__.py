"""Test-suite package (enables relative helper imports)."""
