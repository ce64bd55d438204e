"""Parse protobuf field attributes into validated field descriptions and message, enumeration and oneof schemas."""

__version__ = "0.1.0"
__all__ = ["__version__"]