"""netmaster docknet binding.

Maps tenant networks onto Docker networks created through the network plugin
and keeps the resulting operational state in the shared state store.
"""

__version__ = "0.1.0"
