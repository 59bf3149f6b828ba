"""modmap — module-level dependency maps of Go projects, sized by code lines."""

__version__ = "0.1.0"
