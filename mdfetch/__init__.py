"""mdfetch — fetch a web page, normalise its HTML and format it as Markdown."""

__version__ = "0.1.0"
