"""
Target schema codecs.
"""

from .codec import SchemaCodec
from .model_codec import ModelCodec
from .struct_codec import StructTypeCodec, data_type_from_name, struct_from_columns

__all__ = [
    "SchemaCodec",
    "ModelCodec",
    "StructTypeCodec",
    "data_type_from_name",
    "struct_from_columns",
]
