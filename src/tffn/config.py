"""Parser configuration.

ParserConfig is a frozen dataclass — immutable after creation, validated
once, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Parser configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ParserConfig(cache_table_size=1024, raise_errors=True)
    """

    # Bucket counts (fixed for the lifetime of the parser, never resized)
    action_table_size: int = 128
    cache_table_size: int = 128

    # Initial capacity of the scratch and output buffers
    buffer_capacity: int = 64

    # Raise FormatError / ActionExistsError instead of recording them
    raise_errors: bool = False

    def __post_init__(self) -> None:
        for field_name in ("action_table_size", "cache_table_size", "buffer_capacity"):
            value = getattr(self, field_name)
            if value <= 0:
                msg = f"ParserConfig.{field_name} must be positive, got {value!r}"
                raise ValueError(msg)
