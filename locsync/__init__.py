"""LocSync – crowd-translation to local locale file synchronizer."""

__version__ = "1.0.0"
