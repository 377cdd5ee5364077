"""
modular_api.modules.catalog

Catalog module: products and their creation use case.
"""

# Package marker; import from submodules.
