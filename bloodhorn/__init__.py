"""Boot manager toolkit: configuration, boot menu, file system readers, network boot packets, signature checks and a rescue shell."""

__version__ = "1.0.0"