# codec/errors.py
"""
codec.errors

Failures raised while decoding feed-update messages. All of them are scoped
to the single message being decoded.
"""


class CodecError(Exception):
    pass


class InvalidInteger(CodecError, ValueError):
    pass


class MalformedWord(InvalidInteger):
    """A transport word or field that is not valid hex."""


class UnsupportedFeedKind(CodecError):
    def __init__(self, asset_class: int, feed_type: int):
        self.asset_class = asset_class
        self.feed_type = feed_type
        super().__init__(
            f"unsupported feed kind asset_class={asset_class} feed_type={feed_type:#06x}"
        )


class TruncatedMessage(CodecError):
    def __init__(self, needed: int, available: int):
        self.needed = needed
        self.available = available
        super().__init__(f"message truncated: need {needed} hex chars, have {available}")
