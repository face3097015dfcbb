# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Codec exports."""

from .base import Body, Codec, CodecProtocol, PassthroughCodec
from .csv_codec import CsvCodec
from .form_codec import FormCodec
from .json_codec import JsonCodec
from .xml_codec import XmlCodec, XmlSerializable

__all__ = [
    "Body",
    "Codec",
    "CodecProtocol",
    "CsvCodec",
    "FormCodec",
    "JsonCodec",
    "PassthroughCodec",
    "XmlCodec",
    "XmlSerializable",
]
