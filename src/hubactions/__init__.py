"""hubactions - drive asynchronous Automation Platform operations from CI."""

__version__ = "0.1.0"
