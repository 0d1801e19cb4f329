"""
ftclient - client for a line-oriented, two-connection file transfer protocol.
"""

__version__ = "0.3.0"
