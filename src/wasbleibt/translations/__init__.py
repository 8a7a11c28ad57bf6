"""JSON translation catalogues shipped with the package."""
