"""
Reference estimation engine.

Runs as its own process (``python -m house_price_pro.engine``) and speaks the
engine wire protocol: one JSON document in on stdin, one JSON document out on
stdout, non-zero exit with diagnostics on stderr on failure.
"""

from house_price_pro.engine.bundle import ModelBundle, estimate, load_bundle

__all__ = ["ModelBundle", "estimate", "load_bundle"]
