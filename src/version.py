"""Service version that is read by project manager tools."""

# [tool.setuptools.dynamic] reads this attribute
__version__ = "0.1.0"
