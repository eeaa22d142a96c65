"""Business logic services.

Import from the submodules (``services.version_service`` etc.); the
repositories depend on ``services.retention``, so this package stays empty
to keep imports acyclic.
"""
