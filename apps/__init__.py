"""Applications built on the reversible engine packages."""
