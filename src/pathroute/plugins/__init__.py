"""Plugin package initialiser.

Keep this file side-effect free: concrete plugins (``logging``) register
themselves with ``Router.register_plugin`` when imported (see
``pathroute.__init__`` for the eager import).
"""

__all__: list[str] = []
