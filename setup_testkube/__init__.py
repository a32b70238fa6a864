"""setup-testkube — install and configure the Testkube CLI on CI runners."""

__version__ = "0.1.0"
