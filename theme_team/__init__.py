"""
Top-level package for the theme team recommender.

This package turns a free-text theme ("spooky dogs", "cute fairy
friends") into a small, varied team of Pokémon drawn from a static
catalog.  It contains the catalog loader, the keyword interpreter, the
filter/score/select pipeline and two thin front ends: a FastAPI service
and a batch CLI.  The package is intentionally lightweight: there are
no side-effects on import and the catalog is only read when a front end
asks for it.
"""
