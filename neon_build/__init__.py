"""Neon Build - native artifact build pipeline for Node.js + Rust projects.

This package drives cargo for the crate in a project's ``native/``
directory and publishes the compiled shared library as ``native/index.node``
for the Node.js runtime to load.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
