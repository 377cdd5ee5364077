"""
modular_api.modules.ordering

Ordering module: customer orders, persisted in their own schema history.
"""

# Package marker; import from submodules.
